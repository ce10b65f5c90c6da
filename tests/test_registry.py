"""
Unit tests for the indicator registry.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed

import pytest

from advisor_chart.core import registry
from advisor_chart.core.registry import (
    IndicatorRegistry,
    RegistrationError,
    create,
    get,
    list_registered,
    register,
    resolve_params,
)


class TestRegistry:
    """Test suite for register/get on an empty registry."""

    @pytest.fixture(autouse=True)
    def empty_registry(self, monkeypatch):
        """Swap in an empty registry, keeping the built-in indicators aside."""
        monkeypatch.setattr(registry, "_default", IndicatorRegistry())

    def test_register_and_get(self):
        @register("EMA")
        class EMA:
            def __init__(self, length=10):
                self.length = length

        assert get("EMA") is EMA
        assert get("EMA")(length=5).length == 5

    def test_decorator_returns_class_unchanged(self):
        class Envelope:
            width = 3

        assert register("ENVELOPE")(Envelope) is Envelope
        assert Envelope.width == 3

    def test_missing_name_lists_available(self):
        @register("EMA")
        class EMA:
            pass

        with pytest.raises(RegistrationError) as exc_info:
            get("VWAP")

        error_msg = str(exc_info.value)
        assert "No class registered under name 'VWAP'" in error_msg
        assert "['EMA']" in error_msg

    def test_empty_registry_message(self):
        with pytest.raises(RegistrationError, match=r"Available registrations: \[\]"):
            get("SMA")

    def test_duplicate_name_for_different_class(self):
        @register("BANDS")
        class KeltnerBands:
            pass

        with pytest.raises(RegistrationError, match="already registered"):

            @register("BANDS")
            class DonchianBands:
                pass

        assert get("BANDS") is KeltnerBands

    def test_same_class_can_register_twice(self):
        @register("EMA")
        class EMA:
            pass

        register("EMA")(EMA)

        assert get("EMA") is EMA

    @pytest.mark.parametrize("name", [123, None, 1.5])
    def test_non_string_name(self, name):
        with pytest.raises(RegistrationError, match="must be a string"):
            register(name)

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name(self, name):
        with pytest.raises(RegistrationError, match="cannot be empty"):
            register(name)

    def test_get_with_non_string_name(self):
        with pytest.raises(RegistrationError, match="lookup name must be a string"):
            get(42)

    def test_list_registered(self):
        assert list_registered() == {}

        @register("EMA")
        class EMA:
            pass

        registered = list_registered()
        assert list(registered) == ["EMA"]
        assert registered["EMA"].endswith(".EMA")

    def test_concurrent_registration(self):
        def register_window(window):
            @register(f"SMA_{window}")
            class WindowedAverage:
                length = window

            return get(f"SMA_{window}").length

        with ThreadPoolExecutor(max_workers=8) as executor:
            futures = [executor.submit(register_window, w) for w in range(2, 22)]
            lengths = sorted(future.result() for future in as_completed(futures))

        assert lengths == list(range(2, 22))
        assert len(list_registered()) == 20

    def test_concurrent_duplicates_register_once(self):
        errors = []
        successes = []
        lock = threading.Lock()

        def try_register():
            try:

                @register("CROSS")
                class Cross:
                    pass

                with lock:
                    successes.append(Cross)
            except RegistrationError as e:
                with lock:
                    errors.append(e)

        with ThreadPoolExecutor(max_workers=5) as executor:
            for future in [executor.submit(try_register) for _ in range(10)]:
                future.result()

        assert len(successes) == 1
        assert len(errors) == 9
        assert get("CROSS") is successes[0]

    def test_resolve_params_fills_defaults(self):
        @register("EMA")
        class EMA:
            @classmethod
            def params(cls):
                return {"length": 10, "adjust": False}

        assert resolve_params("EMA", {"length": 30}) == {"length": 30, "adjust": False}

    def test_resolve_params_rejects_unknown_keys(self):
        @register("EMA")
        class EMA:
            @classmethod
            def params(cls):
                return {"length": 10}

        with pytest.raises(RegistrationError) as exc_info:
            resolve_params("EMA", {"window": 30, "span": 2})

        error_msg = str(exc_info.value)
        assert "Unknown parameters ['span', 'window'] for indicator 'EMA'" in error_msg
        assert "expected some of ['length']" in error_msg

    def test_class_without_params_accepts_any_keyword(self):
        @register("ENVELOPE")
        class Envelope:
            def __init__(self, **options):
                self.options = options

        assert create("ENVELOPE", width=3).options == {"width": 3}

    def test_create_uses_defaults(self):
        @register("EMA")
        class EMA:
            @classmethod
            def params(cls):
                return {"length": 10}

            def __init__(self, length):
                self.length = length

        assert create("EMA").length == 10
        assert create("EMA", length=4).length == 4

    def test_create_unknown_name(self):
        with pytest.raises(RegistrationError, match="No class registered under name 'EMA'"):
            create("EMA", length=4)

    def test_registries_are_independent(self):
        other = IndicatorRegistry()

        class EMA:
            pass

        other.add("EMA", EMA)

        assert other.lookup("EMA") is EMA
        assert list_registered() == {}


class TestBuiltInIndicators:
    """The package registers its overlays on import."""

    def test_overlay_indicators_registered(self):
        import advisor_chart.indicators  # noqa: F401

        registered = list_registered()
        assert registered["SMA"] == "advisor_chart.indicators.sma.SMA"
        assert registered["BBANDS"] == "advisor_chart.indicators.bollinger.BBANDS"
        assert registered["MA_CROSS"] == "advisor_chart.indicators.crossover.MA_CROSS"

    def test_indicator_params_are_constructor_defaults(self):
        import advisor_chart.indicators  # noqa: F401

        for name in ("SMA", "BBANDS", "MA_CROSS"):
            cls = get(name)
            instance = cls(**cls.params())
            for key, value in cls.params().items():
                assert getattr(instance, key) == value

    def test_create_built_in_from_config_values(self):
        sma = create("SMA", length=100)

        assert sma.length == 100
        assert create("BBANDS", k=3).length == 20
