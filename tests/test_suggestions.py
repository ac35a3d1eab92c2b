"""
Tests for the debounced autocomplete.
"""
import asyncio

import pytest

from utils.suggestions import SuggestionDebouncer, SuggestionQuery


QUIET = 0.05


class RecordingFetch:
    """Fetch stub that records every query and can hold replies until released."""

    def __init__(self, replies=None, gated=False):
        self.replies = replies or {}
        self.queries = []
        self.gates = {}
        self.gated = gated

    async def __call__(self, text):
        self.queries.append(text)
        if self.gated:
            gate = self.gates.setdefault(text, asyncio.Event())
            await gate.wait()
        reply = self.replies.get(text, [f"{text} result"])
        if isinstance(reply, Exception):
            raise reply
        return reply

    def release(self, text):
        self.gates.setdefault(text, asyncio.Event()).set()


async def wait_for_requests(debouncer, count):
    for _ in range(100):
        if debouncer.requests_issued >= count:
            return
        await asyncio.sleep(0.01)
    raise AssertionError(f"expected {count} requests, saw {debouncer.requests_issued}")


@pytest.mark.asyncio
async def test_short_query_issues_no_request():
    fetch = RecordingFetch()
    debouncer = SuggestionDebouncer(fetch, quiet_period=QUIET)

    debouncer.update('Fr')
    await asyncio.sleep(QUIET * 3)
    await debouncer.settle()

    assert fetch.queries == []
    assert debouncer.suggestions == []


@pytest.mark.asyncio
async def test_rapid_edits_issue_one_request_for_final_text():
    fetch = RecordingFetch()
    debouncer = SuggestionDebouncer(fetch, quiet_period=QUIET)

    for text in ('Fra', 'Fran', 'Franc', 'Franci'):
        debouncer.update(text)
        await asyncio.sleep(QUIET / 5)
    await debouncer.settle()

    assert fetch.queries == ['Franci']
    assert debouncer.requests_issued == 1
    assert debouncer.suggestions == ['Franci result']


@pytest.mark.asyncio
async def test_query_text_is_trimmed():
    fetch = RecordingFetch()
    debouncer = SuggestionDebouncer(fetch, quiet_period=QUIET)

    debouncer.update('  Clare  ')
    await debouncer.settle()

    assert fetch.queries == ['Clare']


@pytest.mark.asyncio
async def test_stale_result_is_discarded():
    fetch = RecordingFetch(replies={'Fra': ['Frances Cabrini'], 'Franc': ['Francis of Assisi']}, gated=True)
    debouncer = SuggestionDebouncer(fetch, quiet_period=QUIET)

    debouncer.update('Fra')
    await wait_for_requests(debouncer, 1)
    debouncer.update('Franc')
    await wait_for_requests(debouncer, 2)

    # The older request resolves first and must not be shown
    fetch.release('Fra')
    await asyncio.sleep(0.01)
    assert debouncer.suggestions == []
    assert debouncer.loading

    fetch.release('Franc')
    await debouncer.settle()

    assert debouncer.suggestions == ['Francis of Assisi']
    assert not debouncer.loading


@pytest.mark.asyncio
async def test_out_of_order_resolution_keeps_latest():
    fetch = RecordingFetch(replies={'Fra': ['Frances Cabrini'], 'Franc': ['Francis of Assisi']}, gated=True)
    debouncer = SuggestionDebouncer(fetch, quiet_period=QUIET)

    debouncer.update('Fra')
    await wait_for_requests(debouncer, 1)
    debouncer.update('Franc')
    await wait_for_requests(debouncer, 2)

    fetch.release('Franc')
    await asyncio.sleep(0.01)
    assert debouncer.suggestions == ['Francis of Assisi']

    fetch.release('Fra')
    await debouncer.settle()

    assert debouncer.suggestions == ['Francis of Assisi']


@pytest.mark.asyncio
async def test_result_dropped_when_text_changed_without_new_request():
    fetch = RecordingFetch(gated=True)
    debouncer = SuggestionDebouncer(fetch, quiet_period=QUIET)

    debouncer.update('Teresa')
    await wait_for_requests(debouncer, 1)
    debouncer.update('Te')
    fetch.release('Teresa')
    await debouncer.settle()

    assert debouncer.suggestions == []
    assert debouncer.requests_issued == 1


@pytest.mark.asyncio
async def test_failure_clears_suggestions_and_loading():
    fetch = RecordingFetch(replies={'Franc': RuntimeError('service down')})
    debouncer = SuggestionDebouncer(fetch, quiet_period=QUIET)
    debouncer.suggestions = ['Francis of Assisi']

    debouncer.update('Franc')
    await debouncer.settle()

    assert debouncer.suggestions == []
    assert not debouncer.loading


@pytest.mark.asyncio
async def test_results_are_capped():
    names = [f"Saint {i}" for i in range(8)]
    fetch = RecordingFetch(replies={'Saint': names})
    debouncer = SuggestionDebouncer(fetch, quiet_period=QUIET)

    debouncer.update('Saint')
    await debouncer.settle()

    assert debouncer.suggestions == names[:5]


@pytest.mark.asyncio
async def test_below_min_length_clears_immediately():
    fetch = RecordingFetch()
    debouncer = SuggestionDebouncer(fetch, quiet_period=QUIET)

    debouncer.update('Augustine')
    await debouncer.settle()
    assert debouncer.suggestions == ['Augustine result']

    debouncer.update('Au')
    assert debouncer.suggestions == []


@pytest.mark.asyncio
async def test_on_change_sees_loading_then_result():
    fetch = RecordingFetch()
    seen = []
    debouncer = SuggestionDebouncer(
        fetch,
        on_change=lambda d: seen.append((d.loading, list(d.suggestions))),
        quiet_period=QUIET,
    )

    debouncer.update('Monica')
    await debouncer.settle()

    assert seen == [(True, []), (False, ['Monica result'])]


@pytest.mark.asyncio
async def test_close_cancels_pending_request():
    fetch = RecordingFetch()
    debouncer = SuggestionDebouncer(fetch, quiet_period=QUIET)

    debouncer.update('Benedict')
    debouncer.close()
    await asyncio.sleep(QUIET * 3)
    await debouncer.settle()

    assert fetch.queries == []


def test_query_identity():
    query = SuggestionQuery(raw_text='Fra', sequence_id=1)
    assert query == SuggestionQuery(raw_text='Fra', sequence_id=1)
    assert query != SuggestionQuery(raw_text='Fra', sequence_id=2)
