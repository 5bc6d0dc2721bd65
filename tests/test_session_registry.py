import asyncio

import pytest

from alerts.alert_models import Band, TransientNotice
from alerts.session_registry import AlertSessionRegistry
from budgets.budget_model import BudgetSnapshot
from transactions.transaction_model import TransactionSnapshot


@pytest.fixture
def registry(make_engine, notice_feed):
    return AlertSessionRegistry(lambda user_id: make_engine(), notice_feed)


@pytest.mark.asyncio
async def test_start_session_is_idempotent(registry, user_id):
    first = registry.start_session(user_id)
    second = registry.start_session(user_id)

    assert first is second
    assert first.running
    assert registry.active_users == [user_id]
    await registry.shutdown()


@pytest.mark.asyncio
async def test_end_session_stops_engine_and_clears_feed(registry, notice_feed, user_id):
    engine = registry.start_session(user_id)
    notice_feed.publish(user_id, TransientNotice(title="t", description="d"))

    assert await registry.end_session(user_id) is True
    assert not engine.running
    assert engine.stopped
    assert registry.get(user_id) is None
    assert notice_feed.pending(user_id) == 0
    assert await registry.end_session(user_id) is False


@pytest.mark.asyncio
async def test_new_session_gets_fresh_alert_state(registry, user_id):
    first = registry.start_session(user_id)
    first.state.mark("b-food", Band.WARN)
    await registry.end_session(user_id)

    second = registry.start_session(user_id)
    assert second is not first
    assert len(second.state) == 0
    await registry.shutdown()
    assert registry.active_users == []


@pytest.mark.asyncio
async def test_manual_tick_in_flight_at_sign_out_emits_nothing(
    make_engine, budget_source, txn_source, notification_sink, notice_sink, notice_feed, user_id
):
    budget_source.budgets = [BudgetSnapshot(id="b-food", category="Food", limit=8000)]
    txn_source.transactions = [TransactionSnapshot(category="Food", amount="-9000")]
    txn_source.gate = asyncio.Event()
    registry = AlertSessionRegistry(lambda uid: make_engine(budget_alerts_enabled=False), notice_feed)
    engine = registry.start_session(user_id)

    pending = asyncio.create_task(engine.tick())
    await asyncio.sleep(0.01)
    assert await registry.end_session(user_id) is True

    txn_source.gate.set()
    assert await pending is False
    assert notification_sink.rows == []
    assert notice_sink.notices == []
    assert len(engine.state) == 0
    assert notice_feed.pending(user_id) == 0
