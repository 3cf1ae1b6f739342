import io
from contextvars import Context

from clew.app import App, Config, get_app, set_app


def test_new_app_with_config():
    app = App(
        Config(profile="test-profile", region="us-west-2", output_format="json", verbose=True)
    )
    assert app.config.profile == "test-profile"
    assert app.config.region == "us-west-2"
    assert app.config.output_format == "json"
    assert app.config.verbose is True


def test_app_getters():
    app = App(Config(profile="my-profile", region="eu-west-1", output_format="csv"))
    assert app.profile == "my-profile"
    assert app.region == "eu-west-1"
    assert app.output_format == "csv"


def test_app_falls_back_to_settings():
    settings = {
        "profile": "cfg-profile",
        "region": "us-east-1",
        "output": "text",
        "default_source": "@prod-api",
    }
    app = App(Config(), settings)
    assert app.profile == "cfg-profile"
    assert app.region == "us-east-1"
    assert app.output_format == "text"
    assert app.default_source == "@prod-api"


def test_app_default_source_empty_when_unset():
    assert App().default_source == ""


def test_app_account_id_cache():
    app = App(Config())
    assert app.account_id_cache == {}
    app.account_id_cache["test-profile"] = "123456789012"
    assert app.account_id_cache["test-profile"] == "123456789012"


def test_debug_writes_when_verbose():
    out = io.StringIO()
    app = App(Config(verbose=True), stream=out)
    app.debug("hello")
    assert out.getvalue() == "DEBUG: hello\n"


def test_debug_uses_verbose_setting():
    out = io.StringIO()
    app = App(Config(), {"verbose": "true"}, stream=out)
    app.debug("from settings")
    assert "from settings" in out.getvalue()


def test_debug_silent_when_not_verbose():
    out = io.StringIO()
    app = App(Config(), stream=out)
    app.debug("hidden")
    assert out.getvalue() == ""


def test_set_and_get_app():
    app = App(Config(profile="context-test", verbose=True))

    def scenario():
        set_app(app)
        return get_app()

    retrieved = Context().run(scenario)
    assert retrieved.config.profile == "context-test"
    assert retrieved.config.verbose is True


def test_get_app_default_when_unset():
    retrieved = Context().run(get_app)
    assert retrieved.config == Config()
    assert retrieved.account_id_cache == {}