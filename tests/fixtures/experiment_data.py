"""
Templates and cookie values shared by the experiment tests.

COOKIE_VALUE decodes to:
    myapp      alpha=on, beta=off, layout=off
    shared-ui  darkHeader=on
    other      no template, kept opaque
"""

APP_NAME = "myapp"

TEMPLATES = {
    "myapp": {
        "features": {
            "alpha": {},
            "beta": {},
            "layout": {"portrait": True, "landscape": False},
        }
    },
    "shared-ui": {"features": {"darkHeader": {}}},
}

COOKIE_VALUE = (
    "u=7,a=myapp,s=s1,v=100,b=B1"
    "&a=shared-ui,s=s2,v=1,b=B2"
    "&a=other,s=s3,v=0101,b=B3"
)

# Shared namespace carrying an undeclared feature "x", written by another app
SHARED_X_COOKIE = "u=7,a=myapp,s=s1,v=000,b=B1&a=shared-ui,s=s2,b=B2,w=2,f=x:1"
