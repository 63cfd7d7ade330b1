"""Tests for external-first player value resolution."""

import asyncio
import math
from decimal import Decimal

import pytest
from trade_analyzer.config.valuation import CuratedNames, ValuationConfig, ValueSourceType
from trade_analyzer.models.league import Player
from trade_analyzer.models.player_valuator import PlayerValuator
from trade_analyzer.models.value_source import ValueCache, ValueSource, coerce_external_value


def make_oracle(result, calls=None, delay=0.0):
    """Oracle returning ``result`` (or raising it) and recording calls."""
    async def oracle(player):
        if calls is not None:
            calls.append(player.name)
        if delay:
            await asyncio.sleep(delay)
        if isinstance(result, Exception):
            raise result
        return result
    return oracle


ALLEN = Player(player_id=1, name="Josh Allen", position="QB")
NOBODY = Player(player_id=2, name="Some Backup", position="RB")


class TestValueSource:
    """Test oracle use and heuristic fallback."""
    
    def test_no_oracle_uses_heuristic(self):
        """Test fallback when no oracle is configured."""
        source = ValueSource()
        valued = asyncio.run(source.resolve_value(ALLEN))
        
        assert valued.value == 60
        assert valued.source == ValueSourceType.FALLBACK
        assert source.uses_external is False
    
    def test_oracle_success(self):
        """Test a valid oracle value is used as external."""
        source = ValueSource(oracle=make_oracle(123))
        valued = asyncio.run(source.resolve_value(ALLEN))
        
        assert valued.value == 123
        assert valued.source == ValueSourceType.EXTERNAL
        assert valued.player_id == ALLEN.player_id
        assert source.uses_external is True
    
    def test_oracle_float_is_rounded(self):
        """Test fractional external values are rounded half up."""
        source = ValueSource(oracle=make_oracle(55.5))
        assert asyncio.run(source.resolve_value(ALLEN)).value == 56
    
    def test_oracle_exception_falls_back(self, caplog):
        """Test oracle errors degrade to the heuristic."""
        source = ValueSource(oracle=make_oracle(RuntimeError("auth required")))
        
        with caplog.at_level("WARNING"):
            valued = asyncio.run(source.resolve_value(ALLEN))
        
        assert valued.value == 60
        assert valued.source == ValueSourceType.FALLBACK
        assert "External valuation failed for Josh Allen: auth required" in caplog.text
    
    @pytest.mark.parametrize("bad", [0, -5, "90", None, True, float("nan"), float("inf")])
    def test_invalid_oracle_results_fall_back(self, bad):
        """Test non-positive or non-numeric results are treated as unavailable."""
        source = ValueSource(oracle=make_oracle(bad))
        valued = asyncio.run(source.resolve_value(NOBODY))
        
        assert valued.value == 80
        assert valued.source == ValueSourceType.FALLBACK
    
    def test_timeout_falls_back(self, caplog):
        """Test slow oracle calls time out to the heuristic."""
        source = ValueSource(oracle=make_oracle(99, delay=1.0), timeout=0.01)
        
        with caplog.at_level("WARNING"):
            valued = asyncio.run(source.resolve_value(ALLEN))
        
        assert valued.source == ValueSourceType.FALLBACK
        assert "timed out" in caplog.text
    
    def test_resolve_many_preserves_order(self):
        """Test batch valuation returns players in input order."""
        values = {"Josh Allen": 300, "Some Backup": 50}
        
        async def oracle(player):
            await asyncio.sleep(0.01 if player.name == "Josh Allen" else 0)
            return values[player.name]
        
        source = ValueSource(oracle=oracle)
        valued = asyncio.run(source.resolve_many([ALLEN, NOBODY]))
        
        assert [p.name for p in valued] == ["Josh Allen", "Some Backup"]
        assert [p.value for p in valued] == [300, 50]
    
    def test_repeat_lookups_without_cache(self):
        """Test correctness without a cache: same input, same value."""
        calls = []
        source = ValueSource(oracle=make_oracle(77, calls))
        
        first = asyncio.run(source.resolve_value(ALLEN))
        second = asyncio.run(source.resolve_value(ALLEN))
        
        assert first == second
        assert len(calls) == 2
    
    def test_concurrent_lookups_share_one_call(self):
        """Test concurrent lookups for the same name hit the oracle once."""
        calls = []
        source = ValueSource(oracle=make_oracle(77, calls, delay=0.01))
        twin = Player(player_id=99, name="Josh Allen", position="QB")
        
        valued = asyncio.run(source.resolve_many([ALLEN, twin]))
        
        assert calls == ["Josh Allen"]
        assert [p.value for p in valued] == [77, 77]
        assert [p.player_id for p in valued] == [1, 99]


class TestValueCache:
    """Test the advisory external value cache."""
    
    def test_cache_avoids_repeat_calls(self):
        """Test cached external values skip the oracle."""
        calls = []
        cache = ValueCache()
        source = ValueSource(oracle=make_oracle(77, calls), cache=cache)
        
        asyncio.run(source.resolve_value(ALLEN))
        valued = asyncio.run(source.resolve_value(ALLEN))
        
        assert calls == ["Josh Allen"]
        assert valued.value == 77
        assert valued.source == ValueSourceType.EXTERNAL
        assert cache.get("Josh Allen") == 77
    
    def test_fallback_values_not_cached(self):
        """Test failures leave the cache empty."""
        cache = ValueCache()
        source = ValueSource(oracle=make_oracle(RuntimeError("down")), cache=cache)
        
        asyncio.run(source.resolve_value(ALLEN))
        
        assert len(cache) == 0
        assert "Josh Allen" not in cache
    
    def test_prepopulated_cache(self):
        """Test a shared cache is consulted before the oracle."""
        calls = []
        cache = ValueCache()
        cache.set("Josh Allen", 210)
        source = ValueSource(oracle=make_oracle(5, calls), cache=cache)
        
        assert asyncio.run(source.resolve_value(ALLEN)).value == 210
        assert calls == []
    
    def test_cache_ignored_without_oracle(self):
        """Test the cache never overrides the heuristic when no oracle is set."""
        cache = ValueCache()
        cache.set("Josh Allen", 210)
        source = ValueSource(cache=cache)
        
        valued = asyncio.run(source.resolve_value(ALLEN))
        assert valued.value == 60
        assert valued.source == ValueSourceType.FALLBACK
    
    def test_last_write_wins(self):
        cache = ValueCache()
        cache.set("Josh Allen", 1)
        cache.set("Josh Allen", 2)
        assert cache.get("Josh Allen") == 2
        cache.clear()
        assert cache.get("Josh Allen") is None


class TestCoerceExternalValue:
    """Test oracle result validation."""
    
    def test_valid_numbers(self):
        assert coerce_external_value(12) == 12
        assert coerce_external_value(12.4) == 12
        assert coerce_external_value(12.5) == 13
        assert coerce_external_value(0.2) == 1
    
    def test_invalid_values(self):
        for bad in (0, -1, -0.5, "12", None, False, True, math.nan, math.inf, [12]):
            assert coerce_external_value(bad) is None
    
    def test_decimal_values(self):
        """Test Decimal results are accepted and rounded half up."""
        assert coerce_external_value(Decimal("42.5")) == 43
        assert coerce_external_value(Decimal("7")) == 7
        assert coerce_external_value(Decimal("NaN")) is None
        assert coerce_external_value(Decimal("-3")) is None
    
    def test_decimal_oracle_result_is_external(self):
        """Test an oracle answering with a Decimal counts as external."""
        source = ValueSource(oracle=make_oracle(Decimal("101.5")))
        valued = asyncio.run(source.resolve_value(ALLEN))
        
        assert valued.value == 102
        assert valued.source == ValueSourceType.EXTERNAL


class TestWithValuator:
    """Test rebinding a source to another heuristic."""
    
    def test_keeps_oracle_cache_and_timeout(self):
        """Test the copy shares everything except the heuristic."""
        cache = ValueCache()
        oracle = make_oracle(5)
        source = ValueSource(oracle=oracle, cache=cache, timeout=2.0)
        config = ValuationConfig(names=CuratedNames(elite=frozenset({"Some Backup"})))
        
        rebound = source.with_valuator(PlayerValuator(config))
        
        assert rebound.oracle is oracle
        assert rebound.cache is cache
        assert rebound.timeout == 2.0
        assert rebound.valuator.config == config
        assert asyncio.run(rebound.resolve_value(NOBODY)).value == 5
