import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import httpx

from devmate.models.execution import ExecutionJob, JobResult
from devmate.services.language_service import resolve_language_id
from devmate.utils.errors import upstream_details
from devmate.utils.judge0_client import Judge0Client
from devmate.utils.output_decoder import decode_field, select_output

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.8  # seconds
POLL_TIMEOUT = 20.0  # seconds, measured from submission


async def submit_job(client: Judge0Client, code: str, language_id: int,
                     clock: Callable[[], float] = time.monotonic) -> Tuple[Optional[ExecutionJob], Any]:
    """
    Create a submission.

    Returns:
        Tuple of (job, raw_response); job is None when no token came back
    """
    created = await client.create_submission(code, language_id, stdin="")
    token = created.get('token') if isinstance(created, dict) else None
    if not token:
        return None, created
    logger.info(f"Judge0 submission created, token={token}")
    return ExecutionJob(token=token, language_id=language_id, submitted_at=clock()), created


async def poll_job(
    client: Judge0Client,
    job: ExecutionJob,
    poll_interval: float = POLL_INTERVAL,
    timeout: float = POLL_TIMEOUT,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Optional[JobResult]:
    """
    Poll a job until it reaches a terminal status or the timeout elapses.

    Returns:
        The terminal result, the last (non-terminal) snapshot on timeout,
        or None when no poll was made at all
    """
    result: Optional[JobResult] = None
    while clock() - job.submitted_at < timeout:
        payload = await client.get_submission(job.token)
        result = JobResult.from_payload(payload)
        logger.info(f"Poll status for {job.token}: {result.status_id} ({result.status_description})")
        if result.is_terminal:
            break
        await sleep(poll_interval)
    return result


def build_response(job: ExecutionJob, result: JobResult) -> Dict[str, Any]:
    output = select_output(
        decode_field(result.compile_output),
        decode_field(result.stderr),
        decode_field(result.stdout),
    )
    return {
        'output': output,
        'status': result.status_description,
        'token': job.token,
        'raw': result.raw,
    }


async def execute_code(
    client: Judge0Client,
    code: str,
    language: str,
    poll_interval: float = POLL_INTERVAL,
    timeout: float = POLL_TIMEOUT,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Tuple[bool, Dict[str, Any], int]:
    """
    Run code on Judge0: resolve the language, submit, poll and decode

    Args:
        client: Judge0 client
        code: source code
        language: language label from the editor
        poll_interval: delay between two status requests, in seconds
        timeout: total polling budget from submission, in seconds
        clock: monotonic clock, injectable for tests
        sleep: awaitable sleep, injectable for tests

    Returns:
        Tuple of (success, body, status_code)
    """
    language_id = await resolve_language_id(client, language)
    if not language_id:
        return False, {'error': f'Unsupported language: {language}'}, 400

    try:
        job, created = await submit_job(client, code, language_id, clock=clock)
        if job is None:
            logger.error(f"No token returned from Judge0 create response: {created}")
            return False, {'error': 'Judge0 did not return a token', 'raw': created}, 500

        result = await poll_job(client, job, poll_interval, timeout, clock=clock, sleep=sleep)
    except (httpx.HTTPError, ValueError) as e:
        details = upstream_details(e)
        logger.error(f"Error in execute: {details}")
        return False, {'error': 'Execution failed', 'details': details}, 500

    if result is None:
        logger.error("No result received after polling")
        return False, {'error': 'No result received from Judge0'}, 500

    if not result.is_terminal:
        logger.warning(f"Polling timed out for {job.token}, using last status {result.status_id}")
    logger.debug(f"Judge0 raw response: {json.dumps(result.raw, default=str)}")

    return True, build_response(job, result), 200
