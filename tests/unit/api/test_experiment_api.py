"""
Tests for the public experiment API and its initialization state machine.
"""

import os
from unittest.mock import MagicMock, patch

import pytest

import fs_experiments
from fs_experiments import (
    ApiState,
    ConfigurationError,
    EXPERIMENT_COOKIE_NAME,
    ExperimentAPI,
    ExperimentSettings,
    ICookieTransport,
    InMemoryCookieJar,
    TemplateError,
    TemplateRegistryClosedError,
)
from tests.fixtures.experiment_data import APP_NAME, COOKIE_VALUE, SHARED_X_COOKIE, TEMPLATES


class TestStateMachine:
    """The cookie is decoded exactly once, on first use."""

    def test_starts_uninitialized(self, api):
        assert api.state is ApiState.UNINITIALIZED
        assert not api.is_initialized

    def test_first_query_initializes(self, api):
        assert api.show_ex("alpha") is True
        assert api.state is ApiState.INITIALIZED

    def test_first_mutation_initializes(self, api):
        api.set_ex("beta", True)

        assert api.is_initialized
        assert api.show_ex("alpha") is True

    def test_active_list_initializes(self, api):
        assert api.active_list() == ["alpha", "darkHeader"]
        assert api.is_initialized

    def test_cookie_is_read_once(self):
        transport = MagicMock(spec=ICookieTransport)
        transport.get.return_value = None
        api = ExperimentAPI(APP_NAME, transport=transport)

        api.initialize()
        api.initialize()
        api.show_ex("alpha")
        api.active_list()

        read_names = [call.args[0] for call in transport.get.call_args_list]
        assert read_names.count(EXPERIMENT_COOKIE_NAME) == 1

    def test_explicit_initialize_then_queries(self, api):
        api.initialize()

        assert api.show_ex("darkHeader") is True


class TestDefaultEx:
    def test_templates_before_first_use(self, cookie_jar):
        api = ExperimentAPI(APP_NAME, transport=cookie_jar)

        api.default_ex(TEMPLATES)

        assert api.show_ex("alpha") is True

    def test_without_templates_every_record_is_opaque(self, cookie_jar):
        api = ExperimentAPI(APP_NAME, transport=cookie_jar)

        assert api.show_ex("alpha") is False
        assert api.active_list() == []

    def test_templates_after_first_use_are_refused(self, api):
        api.show_ex("alpha")

        with pytest.raises(TemplateRegistryClosedError):
            api.default_ex({"myapp": {"features": {"late": {}}}})

    def test_invalid_template_raises(self, cookie_jar):
        api = ExperimentAPI(APP_NAME, transport=cookie_jar)

        with pytest.raises(TemplateError):
            api.default_ex({"myapp": {"features": ["alpha"]}})


class TestQueries:
    """Testable properties of the public surface."""

    def test_default_on_absence(self, api):
        assert api.show_ex("nope", True) is True
        assert api.show_ex("nope") is False

    def test_shared_precedence_and_write_routing(self, templates):
        jar = InMemoryCookieJar({EXPERIMENT_COOKIE_NAME: SHARED_X_COOKIE})
        api = ExperimentAPI(APP_NAME, transport=jar, registry=templates)

        assert api.show_ex("x") is True

        api.set_ex("x", False)

        assert api.show_ex("x") is False
        assert "x" not in api.manager.app.features
        assert api.dirty_features("shared-ui") == ["x"]

    def test_dirty_tracking_is_idempotent(self, api):
        api.set_ex("x", True)
        api.set_ex("x", True)

        assert api.dirty_features() == ["x"]

    def test_set_ex_writes_cookie(self, api, cookie_jar):
        api.set_ex("beta", True)

        assert "a=myapp,s=s1,v=110,b=B1" in cookie_jar.get(EXPERIMENT_COOKIE_NAME)
        assert "a=other,s=s3,v=0101,b=B3" in cookie_jar.get(EXPERIMENT_COOKIE_NAME)

    def test_set_ex_keeps_shared_record_without_shared_template(self):
        jar = InMemoryCookieJar(
            {EXPERIMENT_COOKIE_NAME: "u=7,a=myapp,s=s1,v=1,b=B1&a=shared-ui,s=s9,v=11,b=B9"}
        )
        api = ExperimentAPI(APP_NAME, transport=jar)
        api.default_ex({APP_NAME: {"features": {"alpha": {}}}})

        api.set_ex("alpha", False)

        assert jar.get(EXPERIMENT_COOKIE_NAME) == (
            "u=7,a=myapp,s=s1,v=0,b=B1&a=shared-ui,s=s9,v=11,b=B9"
        )

    def test_garbage_cookie_never_raises(self, templates):
        jar = InMemoryCookieJar({EXPERIMENT_COOKIE_NAME: "garbage&&,,=="})
        api = ExperimentAPI(APP_NAME, transport=jar, registry=templates)

        assert api.show_ex("alpha") is False
        assert api.active_list() == []

    def test_reload_and_reset(self, api, cookie_jar):
        api.set_ex("beta", True)
        cookie_jar.set(EXPERIMENT_COOKIE_NAME, COOKIE_VALUE)

        api.reload()
        assert api.show_ex("beta") is False

        api.reset()
        assert api.show_ex("alpha") is False
        assert cookie_jar.get(EXPERIMENT_COOKIE_NAME) is None


class TestConstruction:
    def test_app_name_is_required(self):
        with pytest.raises(ConfigurationError):
            ExperimentAPI()

    def test_app_name_and_templates_from_settings(self, cookie_jar):
        settings = ExperimentSettings(app_name=APP_NAME, templates=TEMPLATES)

        api = ExperimentAPI(transport=cookie_jar, settings=settings)

        assert api.app_name == APP_NAME
        assert api.show_ex("alpha") is True

    def test_defaults_to_in_memory_transport(self):
        api = ExperimentAPI(APP_NAME)

        api.set_ex("alpha", True)

        assert isinstance(api.transport, InMemoryCookieJar)
        assert api.transport.get(EXPERIMENT_COOKIE_NAME) is not None

    def test_custom_cookie_name(self, templates):
        jar = InMemoryCookieJar()
        settings = ExperimentSettings(app_name=APP_NAME, cookie_name="exp")
        api = ExperimentAPI(transport=jar, registry=templates, settings=settings)

        api.set_ex("alpha", True)

        assert jar.get("exp") is not None
        assert jar.get(EXPERIMENT_COOKIE_NAME) is None


class TestModuleLevelApi:
    """Convenience functions backed by the default API."""

    def test_templates_before_configure_are_kept(self, cookie_jar):
        fs_experiments.default_ex(TEMPLATES)
        fs_experiments.configure(APP_NAME, transport=cookie_jar)

        assert fs_experiments.show_ex("alpha") is True
        assert fs_experiments.active_list() == ["alpha", "darkHeader"]

    def test_set_ex_through_default_api(self, cookie_jar):
        fs_experiments.configure(APP_NAME, transport=cookie_jar)
        fs_experiments.default_ex(TEMPLATES)

        fs_experiments.set_ex("beta", True)

        assert fs_experiments.show_ex("beta") is True
        assert fs_experiments.get_api().dirty_features() == ["beta"]

    def test_get_api_uses_environment_app_name(self):
        with patch.dict(os.environ, {"FS_EXPERIMENTS_APP_NAME": "envapp"}):
            api = fs_experiments.get_api()

        assert api.app_name == "envapp"
        assert fs_experiments.get_api() is api

    def test_get_api_falls_back_to_default_name(self):
        with patch.dict(os.environ, {}, clear=True):
            api = fs_experiments.get_api()

        assert api.app_name == "default"
        assert fs_experiments.show_ex("anything", True) is True
