import asyncio

from f95metadata.errors import Cancelled


def raise_if_cancelled(cancel_event):
    if cancel_event is not None and cancel_event.is_set():
        raise Cancelled()


async def run_cancellable(awaitable, cancel_event=None):
    """
    Awaits `awaitable`, giving up as soon as `cancel_event` is set.
    Raises Cancelled instead of returning a late result. Task cancellation
    of the caller propagates as usual.
    """
    if cancel_event is None:
        return await awaitable

    task = asyncio.ensure_future(awaitable)
    if cancel_event.is_set():
        task.cancel()
        raise Cancelled()

    waiter = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        waiter.cancel()
        raise

    if task in done:
        waiter.cancel()
        return task.result()

    task.cancel()
    raise Cancelled()
