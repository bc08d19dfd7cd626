"""
Tests for CartSubmissionWorkflow
"""
import asyncio
from decimal import Decimal

import pytest

from conftest import instant_add, make_product
from storefront.errors import (
    AddToCartFailedError,
    OutOfStockError,
    VariantNotFoundError,
    VariantRequiredError,
)
from storefront.services.workflow import (
    CartSubmissionWorkflow,
    WorkflowState,
    allowed_targets,
)


def _workflow(product, store, notifier, add=instant_add, **kw):
    return CartSubmissionWorkflow(product, store, notifier, add_to_cart=add, **kw)


async def _until_called(gate):
    while not gate.calls:
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_single_variant_submits_without_selection(store, notifier):
    product = make_product(id=5, price="695", variants=[("One Size", "695")])
    wf = _workflow(product, store, notifier)

    result = await wf.submit()

    assert result.ok
    assert result.item.selected_variant_name == "One Size"
    assert result.item.variant_price == Decimal("695")
    assert store.items == [result.item]
    assert notifier.pop().message == "Added to cart!"
    assert notifier.pop() is None
    assert wf.state is WorkflowState.IDLE


@pytest.mark.asyncio
@pytest.mark.parametrize("selected", [None, "Small", "Large"])
async def test_even_id_is_out_of_stock(store, notifier, gate, selected):
    wf = _workflow(make_product(id=4), store, notifier, add=gate)

    result = await wf.submit(selected)

    assert not result.ok
    assert isinstance(result.error, OutOfStockError)
    assert isinstance(wf.last_error, OutOfStockError)
    assert store.items == []
    assert gate.calls == []
    notice = notifier.pop()
    assert (notice.level, notice.message) == ("error", "Product is out of stock!")
    assert len(notifier) == 0


@pytest.mark.asyncio
async def test_multi_variant_requires_selection(store, notifier, gate):
    wf = _workflow(make_product(id=3), store, notifier, add=gate)

    result = await wf.submit()

    assert isinstance(result.error, VariantRequiredError)
    assert str(result.error) == "Please select a variant!"
    assert store.items == []
    assert gate.calls == []
    assert len(notifier) == 1


@pytest.mark.asyncio
async def test_blank_selection_counts_as_none(store, notifier):
    wf = _workflow(make_product(id=3), store, notifier)

    result = await wf.submit("")

    assert isinstance(result.error, VariantRequiredError)


@pytest.mark.asyncio
async def test_large_variant_charges_surcharge(store, notifier):
    wf = _workflow(make_product(id=7, price="20"), store, notifier)

    result = await wf.submit("Large")

    assert result.ok
    assert result.item.variant_price == Decimal("30")
    assert result.item.selected_variant_name == "Large"
    assert len(store.items) == 1
    assert result.item.as_dict()["variantPrice"] == Decimal("30")


@pytest.mark.asyncio
async def test_unknown_variant_rejected_before_remote_call(store, notifier, gate):
    wf = _workflow(make_product(id=1), store, notifier, add=gate)

    result = await wf.submit("XXL")

    assert isinstance(result.error, VariantNotFoundError)
    assert result.error.name == "XXL"
    assert gate.calls == []
    assert store.items == []
    assert notifier.pop().message == "Unknown variant: XXL"


@pytest.mark.asyncio
async def test_second_submit_while_submitting_is_ignored(store, notifier, gate):
    wf = _workflow(make_product(id=1), store, notifier, add=gate)

    first = asyncio.create_task(wf.submit("Large"))
    await _until_called(gate)
    assert wf.state is WorkflowState.SUBMITTING
    assert wf.busy and wf.is_loading

    second = await wf.submit("Small")
    assert second.ignored and not second.ok
    assert len(notifier) == 0

    gate.release.set()
    result = await first

    assert result.ok
    assert gate.calls == [(1, "Large")]
    assert len(store.items) == 1
    assert len(notifier) == 1
    assert not wf.busy
    assert wf.state is WorkflowState.IDLE


@pytest.mark.asyncio
async def test_transition_sequences(store, notifier):
    seen = []
    wf = _workflow(
        make_product(id=1),
        store,
        notifier,
        on_transition=lambda old, new: seen.append(new),
    )

    await wf.submit("Medium")
    assert seen == [
        WorkflowState.VALIDATING,
        WorkflowState.SUBMITTING,
        WorkflowState.SUCCEEDED,
        WorkflowState.IDLE,
    ]

    seen.clear()
    await wf.submit()
    assert seen == [WorkflowState.VALIDATING, WorkflowState.FAILED, WorkflowState.IDLE]


@pytest.mark.asyncio
async def test_failing_remote_call_reports_error(store, notifier):
    async def broken(product, variant_name):
        raise ConnectionError("boom")

    wf = _workflow(make_product(id=1), store, notifier, add=broken)

    result = await wf.submit("Small")

    assert isinstance(result.error, AddToCartFailedError)
    assert store.items == []
    assert notifier.pop().level == "error"
    assert wf.state is WorkflowState.IDLE
    assert not wf.busy


@pytest.mark.asyncio
async def test_remote_cart_error_passes_through(store, notifier):
    async def sold_out(product, variant_name):
        raise OutOfStockError()

    wf = _workflow(make_product(id=1), store, notifier, add=sold_out)

    result = await wf.submit("Small")

    assert isinstance(result.error, OutOfStockError)
    assert store.items == []


@pytest.mark.asyncio
async def test_timeout_fails_attempt(store, notifier, gate):
    wf = _workflow(make_product(id=1), store, notifier, add=gate, timeout=0.01)

    result = await wf.submit("Small")

    assert isinstance(result.error, AddToCartFailedError)
    assert store.items == []
    assert len(notifier) == 1
    assert wf.state is WorkflowState.IDLE


@pytest.mark.asyncio
async def test_cancel_returns_to_idle_without_notice(store, notifier, gate):
    wf = _workflow(make_product(id=1), store, notifier, add=gate)

    task = asyncio.create_task(wf.submit("Small"))
    await _until_called(gate)
    assert wf.cancel()

    result = await task

    assert result.cancelled
    assert not result.ok
    assert not task.cancelled()
    assert wf.state is WorkflowState.IDLE
    assert not wf.busy
    assert store.items == []
    assert len(notifier) == 0
    assert not wf.cancel()


@pytest.mark.asyncio
async def test_cancel_leaves_awaiting_handler_running(store, notifier, gate):
    wf = _workflow(make_product(id=1), store, notifier, add=gate)
    after = []

    async def handler():
        result = await wf.submit("Small")
        after.append(result)

    task = asyncio.create_task(handler())
    await _until_called(gate)
    wf.cancel()
    await task

    assert [r.cancelled for r in after] == [True]


@pytest.mark.asyncio
async def test_cancelling_caller_still_propagates(store, notifier, gate):
    wf = _workflow(make_product(id=1), store, notifier, add=gate)

    task = asyncio.create_task(wf.submit("Small"))
    await _until_called(gate)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert wf.state is WorkflowState.IDLE
    assert not wf.busy
    assert store.items == []
    assert len(notifier) == 0


@pytest.mark.asyncio
async def test_success_clears_last_error(store, notifier):
    wf = _workflow(make_product(id=1), store, notifier)

    await wf.submit()
    assert isinstance(wf.last_error, VariantRequiredError)

    await wf.submit("Small")
    assert wf.last_error is None
    assert len(store.items) == 1


def test_can_submit_mirrors_button_rule(store, notifier):
    multi = _workflow(make_product(id=1), store, notifier)
    assert not multi.can_submit()
    assert multi.can_submit("Small")

    single = _workflow(make_product(id=1, variants=[("One Size", "10")]), store, notifier)
    assert single.can_submit()

    sold_out = _workflow(make_product(id=2), store, notifier)
    assert not sold_out.can_submit("Small")


def test_allowed_targets():
    assert allowed_targets(WorkflowState.IDLE) == [WorkflowState.VALIDATING]
    assert allowed_targets(WorkflowState.VALIDATING) == [WorkflowState.FAILED, WorkflowState.SUBMITTING]
    assert allowed_targets(WorkflowState.SUCCEEDED) == [WorkflowState.IDLE]


@pytest.mark.asyncio
async def test_default_notifier_logs(store, caplog):
    wf = CartSubmissionWorkflow(make_product(id=2), store, add_to_cart=instant_add)

    with caplog.at_level("WARNING", logger="storefront.services.notifications"):
        await wf.submit("Small")

    assert "Product is out of stock!" in caplog.text
