"""
Tests for temporary experiment overrides.
"""

from fs_experiments import EXPERIMENT_COOKIE_NAME, disable_all_experiments, override_experiments
from tests.fixtures.experiment_data import COOKIE_VALUE


class TestOverrideExperiments:
    def test_values_are_overridden_inside_block(self, api):
        with override_experiments(api, {"alpha": False, "beta": True, "layout#landscape": True}):
            assert api.show_ex("alpha") is False
            assert api.show_ex("beta") is True
            assert api.show_ex("layout#landscape") is True

    def test_values_are_restored_after_block(self, api):
        with override_experiments(api, {"alpha": False, "darkHeader": False}):
            pass

        assert api.show_ex("alpha") is True
        assert api.show_ex("darkHeader") is True

    def test_values_are_restored_after_exception(self, api):
        try:
            with override_experiments(api, {"alpha": False}):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert api.show_ex("alpha") is True

    def test_cookie_is_not_written(self, api, cookie_jar):
        with override_experiments(api, {"beta": True}):
            assert cookie_jar.get(EXPERIMENT_COOKIE_NAME) == COOKIE_VALUE

        assert cookie_jar.get(EXPERIMENT_COOKIE_NAME) == COOKIE_VALUE

    def test_overrides_are_not_dirty(self, api):
        with override_experiments(api, {"beta": True}):
            assert api.dirty_features() == []

    def test_yields_the_api(self, api):
        with override_experiments(api, {}) as overridden:
            assert overridden is api


class TestDisableAllExperiments:
    def test_everything_off_inside_block(self, api):
        with disable_all_experiments(api):
            assert api.active_list() == []
            assert api.show_ex("alpha") is False

        assert api.active_list() == ["alpha", "darkHeader"]
