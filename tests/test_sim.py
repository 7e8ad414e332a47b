import pytest

from jimmyb.sim import DexType, PositionStatus, SimEngine, SimPosition


def make_pos(entry=1.0, amount=2.0, tp=None, sl=None, dex=DexType.V2):
    return SimPosition(
        pair_address="0xpair",
        dex_type=dex,
        base_token="TOK",
        quote_token="WBNB",
        entry_price=entry,
        buy_amount_wbnb=amount,
        tp_pct=tp,
        sl_pct=sl,
    )


def open_engine(pair="0xpair", price=1.0, tp=None, sl=None, max_positions=5):
    engine = SimEngine(max_positions)
    assert engine.submit_buy(pair, DexType.V2, "TOK", "WBNB", 1.0, tp, sl)
    engine.update_or_execute(pair, price, 1000.0, True)
    return engine


def test_new_position_defaults():
    pos = make_pos(entry=3.0, amount=2.0)
    assert pos.current_price == 3.0
    assert pos.remaining_amount_wbnb == 2.0
    assert pos.status is PositionStatus.OPEN
    assert pos.is_open()
    assert pos.duration_secs() >= 0


def test_take_profit_closes():
    pos = make_pos(tp=10.0)
    assert pos.update_price(2.0) is True
    assert pos.status is PositionStatus.CLOSED_TP
    assert not pos.is_open()
    assert pos.closed_at is not None


def test_stop_loss_closes():
    pos = make_pos(sl=5.0)
    assert pos.update_price(0.5) is True
    assert pos.status is PositionStatus.CLOSED_SL


def test_frozen_never_auto_closes():
    pos = make_pos(tp=10.0, sl=5.0)
    pos.frozen = True
    assert pos.update_price(2.0) is False
    assert pos.is_open()
    assert pos.pnl_pct > 0


def test_zero_entry_price_skips_pnl():
    pos = make_pos(entry=0.0, tp=1.0)
    assert pos.update_price(5.0) is False
    assert pos.current_price == 5.0
    assert pos.pnl_pct == 0.0


def test_partial_sell_invalid_fraction():
    pos = make_pos()
    pos.update_price(2.0)
    for bad in (0.0, -0.5, 1.5):
        assert pos.partial_sell_fraction(bad) == 0.0
    assert pos.remaining_amount_wbnb == pos.buy_amount_wbnb


def test_partial_sell_invariants():
    pos = make_pos(amount=2.0)
    pos.update_price(1.5)
    total_before = pos.total_pnl_wbnb()
    realized = pos.partial_sell_fraction(0.25)
    assert realized > 0
    assert pos.realized_pnl_wbnb == pytest.approx(realized)
    assert pos.total_pnl_wbnb() == pytest.approx(total_before)
    assert pos.remaining_amount_wbnb < pos.buy_amount_wbnb


def test_partial_sell_full_fraction_zeroes_remaining():
    pos = make_pos()
    pos.update_price(1.2)
    pos.partial_sell_fraction(1.0)
    assert pos.remaining_amount_wbnb == 0.0
    assert pos.pnl_wbnb == 0.0
    assert pos.partial_sell_fraction(0.5) == 0.0


def test_liquidity_alert_latches_until_ack():
    pos = make_pos()
    pos.update_liquidity(1.0)
    assert pos.out_of_liq and pos.needs_liq_ack
    pos.update_liquidity(100.0)
    assert pos.out_of_liq and pos.needs_liq_ack
    pos.needs_liq_ack = False
    pos.update_liquidity(100.0)
    assert not pos.out_of_liq
    assert pos.liquidity_usd == 100.0


def test_liquidity_alert_is_one_shot():
    pos = make_pos()
    pos.update_liquidity(1.0)
    pos.needs_liq_ack = False
    pos.update_liquidity(2.0)
    assert pos.out_of_liq
    assert not pos.needs_liq_ack


def test_fourmeme_ignores_liquidity_guard():
    pos = make_pos(dex=DexType.FOUR_MEME)
    pos.update_liquidity(1.0)
    assert not pos.out_of_liq
    assert not pos.needs_liq_ack
    assert pos.liquidity_usd == 1.0


def test_submit_then_execute_at_next_price():
    engine = SimEngine(3)
    assert engine.submit_buy("0xa", DexType.V3, "TOK", "WBNB", 1.0, None, None)
    assert engine.has_position_or_pending("0xa")
    assert engine.open_position("0xa") is None
    msg = engine.update_or_execute("0xa", 0.25, None, True)
    assert msg.startswith("EXECUTED buy for TOK")
    assert "simulated 1-block delay" in msg
    pos = engine.open_position("0xa")
    assert pos.entry_price == 0.25
    assert pos.dex_type is DexType.V3


def test_submit_rejects_duplicates_and_limit():
    engine = SimEngine(2)
    assert engine.submit_buy("0xa", DexType.V2, "A", "WBNB", 1.0, None, None)
    assert not engine.submit_buy("0xa", DexType.V2, "A", "WBNB", 1.0, None, None)
    assert engine.submit_buy("0xb", DexType.V2, "B", "WBNB", 1.0, None, None)
    assert not engine.submit_buy("0xc", DexType.V2, "C", "WBNB", 1.0, None, None)
    engine.update_max_positions(3)
    assert engine.submit_buy("0xc", DexType.V2, "C", "WBNB", 1.0, None, None)


def test_take_position_blocks_rebuy():
    engine = open_engine()
    engine.update_or_execute("0xpair", 2.0, None, True)
    closed = engine.take_position("0xpair")
    assert closed.status is PositionStatus.CLOSED_MANUAL
    assert closed.pnl_wbnb > 0
    assert engine.open_position("0xpair") is None
    assert engine.take_position("0xpair") is None
    assert [p.pair_address for p in engine.closed_positions()] == ["0xpair"]
    assert engine.has_position_or_pending("0xpair")
    assert not engine.submit_buy("0xpair", DexType.V2, "TOK", "WBNB", 1.0, None, None)


def test_take_position_includes_partial_realized():
    engine = open_engine()
    engine.update_or_execute("0xpair", 2.0, None, True)
    realized, fully_sold = engine.partial_take("0xpair", 0.5)
    assert not fully_sold
    before = engine.open_position("0xpair").total_pnl_wbnb()
    closed = engine.take_position("0xpair")
    assert closed.pnl_wbnb == pytest.approx(before)
    assert realized > 0


def test_partial_take_full_keeps_position():
    engine = open_engine()
    engine.update_or_execute("0xpair", 2.0, None, True)
    _, fully_sold = engine.partial_take("0xpair", 1.0)
    assert fully_sold is True
    assert engine.open_position("0xpair") is not None
    assert engine.partial_take("0xmissing", 0.5) is None


def test_partial_take_frozen_returns_none():
    engine = open_engine()
    assert engine.set_freeze("0xpair", True)
    assert engine.partial_take("0xpair", 0.5) is None


def test_remove_position_and_pending():
    engine = SimEngine(5)
    engine.submit_buy("0xa", DexType.V2, "A", "WBNB", 1.0, None, None)
    assert engine.remove_position("0xa") is True
    assert engine.remove_position("0xa") is False
    assert engine.has_position_or_pending("0xa")
    assert engine.stats().total_trades == 0


def test_take_all_skips_frozen():
    engine = SimEngine(5)
    for pair in ("0xa", "0xb"):
        engine.submit_buy(pair, DexType.V2, pair, "WBNB", 1.0, None, None)
        engine.update_or_execute(pair, 1.0, None, True)
    engine.toggle_freeze("0xb")
    closed = engine.take_all()
    assert [p.pair_address for p in closed] == ["0xa"]
    assert [p.pair_address for p in engine.open_positions()] == ["0xb"]


def test_tp_auto_close_moves_to_closed():
    engine = open_engine(tp=10.0)
    assert engine.update_or_execute("0xpair", 2.0, None, True) is None
    assert engine.open_position("0xpair") is None
    assert engine.closed_positions()[0].status is PositionStatus.CLOSED_TP


def test_tp_without_allow_close_keeps_position():
    engine = open_engine(tp=10.0)
    engine.update_or_execute("0xpair", 2.0, None, False)
    assert engine.open_position("0xpair") is not None
    assert engine.closed_positions() == []


def test_max_hold_closes_old_position():
    engine = open_engine()
    engine.set_max_hold_secs(1)
    engine.open_positions()[0].opened_at -= 10
    msg = engine.update_or_execute("0xpair", 1.0, None, True)
    assert msg.startswith("⏰ MAX HOLD TAKE closed TOK (0xpair)")
    assert msg.endswith("WBNB")
    assert engine.closed_positions()[0].status is PositionStatus.CLOSED_MANUAL


def test_max_hold_pnl_gate():
    engine = open_engine()
    engine.set_max_hold_secs(1)
    engine.open_positions()[0].opened_at -= 10
    assert engine.update_or_execute("0xpair", 3.0, None, True) is None
    assert engine.open_position("0xpair") is not None
    engine.set_max_hold_pnl_enabled(False)
    assert engine.update_or_execute("0xpair", 3.0, None, True) is not None
    assert engine.open_position("0xpair") is None


def test_stats_counts():
    engine = SimEngine(5)
    for pair, price in (("0xa", 2.0), ("0xb", 0.5)):
        engine.submit_buy(pair, DexType.V2, pair, "WBNB", 1.0, None, None)
        engine.update_or_execute(pair, 1.0, None, True)
        engine.update_or_execute(pair, price, None, True)
        engine.take_position(pair)
    stats = engine.stats()
    assert stats.total_trades == 2
    assert stats.winning_trades == 1
    assert stats.losing_trades == 1
    assert stats.win_rate == 50.0
    assert stats.avg_pnl_per_trade == pytest.approx(stats.total_pnl_closed / 2)
    assert stats.open_positions == 0


def test_empty_stats():
    stats = SimEngine(1).stats()
    assert stats.win_rate == 0.0
    assert stats.avg_pnl_per_trade == 0.0
    assert stats.total_pnl_realized == 0.0


def test_reset_clears():
    engine = open_engine()
    engine.submit_buy("0xb", DexType.V2, "B", "WBNB", 1.0, None, None)
    engine.take_position("0xpair")
    engine.reset()
    assert engine.open_positions() == []
    assert engine.closed_positions() == []
    assert not engine.has_position_or_pending("0xb")


def test_freeze_controls():
    engine = open_engine()
    assert engine.toggle_freeze("0xpair") is True
    assert engine.toggle_freeze("0xpair") is False
    assert engine.toggle_freeze("0xnone") is None
    assert engine.set_freeze("0xnone", True) is False


def test_liq_alerts_in_engine():
    engine = SimEngine(5)
    engine.add_real_position("0xa", DexType.V2, "A", "WBNB", 1.0, 1.0, None, None, 1.0)
    engine.add_real_position("0xb", DexType.FOUR_MEME, "B", "WBNB", 1.0, 1.0, None, None, 1.0)
    assert engine.position_needs_liq_ack("0xa")
    assert not engine.position_needs_liq_ack("0xb")
    assert engine.has_pending_liq_alert()
    assert engine.ack_all_liq_alerts() == 1
    assert not engine.has_pending_liq_alert()
    assert engine.ack_all_liq_alerts() == 0


def test_add_real_position_does_not_overwrite():
    engine = SimEngine(5)
    engine.add_real_position("0xa", DexType.V2, "A", "WBNB", 1.0, 1.0, None, None, None)
    engine.add_real_position("0xa", DexType.V2, "A", "WBNB", 9.0, 1.0, None, None, None)
    assert engine.open_position("0xa").entry_price == 1.0


def test_open_positions_sorted_oldest_first():
    engine = SimEngine(5)
    for pair in ("0xa", "0xb", "0xc"):
        engine.add_real_position(pair, DexType.V2, pair, "WBNB", 1.0, 1.0, None, None, None)
    engine.open_positions()[0].opened_at += 100
    order = [p.pair_address for p in engine.open_positions()]
    assert order[-1] == "0xa"
    times = [p.opened_at for p in engine.open_positions()]
    assert times == sorted(times)


def test_open_position_returns_copy():
    engine = open_engine()
    snapshot = engine.open_position("0xpair")
    snapshot.frozen = True
    assert engine.open_position("0xpair").frozen is False