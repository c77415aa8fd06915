from newsextract.services.strategies import FieldStrategy, resolve_field


def _first(value):
    return value


def _second(value):
    return f"{value}-second"


class FakeLogger:
    def __init__(self):
        self.records = []

    def _record(self, level, **kwargs):
        self.records.append((level, kwargs))

    def info(self, **kwargs):
        self._record("info", **kwargs)

    def warning(self, **kwargs):
        self._record("warning", **kwargs)

    def debug(self, **kwargs):
        self._record("debug", **kwargs)


def test_first_non_empty_value_wins():
    strategies = (
        FieldStrategy("empty", lambda value: "  "),
        FieldStrategy("first", _first),
        FieldStrategy("second", _second),
    )
    assert resolve_field("title", strategies, "headline") == ("headline", "first")


def test_validator_rejects_candidates():
    strategies = (FieldStrategy("first", _first), FieldStrategy("second", _second))
    value, name = resolve_field(
        "title", strategies, "x", validate=lambda candidate: len(candidate) > 3
    )
    assert (value, name) == ("x-second", "second")


def test_exhausted_chain_returns_none(monkeypatch):
    fake = FakeLogger()
    monkeypatch.setattr("newsextract.services.strategies.logger", fake)

    strategies = (FieldStrategy("empty", lambda value: None),)
    assert resolve_field("authors", strategies, "x", url="https://example.com/a") == (None, None)
    assert fake.records[-1] == (
        "info",
        {
            "event": "field_unresolved",
            "operation": "extractor.field",
            "field": "authors",
            "url": "https://example.com/a",
        },
    )


def test_raising_strategy_is_logged_and_skipped(monkeypatch):
    fake = FakeLogger()
    monkeypatch.setattr("newsextract.services.strategies.logger", fake)

    def broken(value):
        raise ValueError("bad markup")

    strategies = (FieldStrategy("broken", broken), FieldStrategy("first", _first))
    assert resolve_field("title", strategies, "headline") == ("headline", "first")

    level, record = fake.records[0]
    assert level == "warning"
    assert record["event"] == "extractor_attempt"
    assert record["strategy"] == "broken"
    assert record["status"] == "exception"
    assert record["error_type"] == "ValueError"


def test_strategy_resolves_module_attribute_at_call_time(monkeypatch):
    strategy = FieldStrategy("first", _first)
    monkeypatch.setattr(f"{__name__}._first", lambda value: "patched")
    assert strategy.run("headline") == "patched"
