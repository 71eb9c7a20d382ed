from fastapi import APIRouter, HTTPException
from sse_starlette.sse import EventSourceResponse
from celery.result import AsyncResult
import json
import uuid
import asyncio
import logging

from linkcheck.core.celery_app import celery_app
from linkcheck.api.schemas import (
    ScanRequest, ScanResponse, LinkCheckResult,
    SummaryModel, TaskStatus, ResultsResponse
)
from linkcheck.services.scanner import check_page
from linkcheck.utils.redis_client import get_redis_client

router = APIRouter()

redis_client = get_redis_client()

FINISHED_STATES = ["SUCCESS", "FAILURE", "REVOKED"]


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    try:
        # Try Redis connection but don't fail if it's not available
        try:
            redis_client.ping()
        except Exception as e:
            logging.warning(f"Redis health check failed: {str(e)}")

        return {"status": "healthy"}
    except Exception as e:
        logging.error(f"Health check failed: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("/scan", response_model=ScanResponse)
async def start_scan(data: ScanRequest):
    """Start a new page check with a unique task_id."""
    task_id = str(uuid.uuid4())
    options = {"timeout": data.timeout, "workers": data.workers}
    check_page.apply_async(args=[task_id, str(data.url), options, data.only_dead], task_id=task_id)
    logging.info(f"Queued check of {data.url} as {task_id}")
    return {"task_id": task_id}

@router.get("/status/{task_id}", response_model=TaskStatus)
async def get_status(task_id: str):
    """Retrieve Celery task status from Redis and Celery."""
    task = AsyncResult(task_id, app=celery_app)
    redis_key = f"celery-task-meta-{task_id}"
    task_result = redis_client.get(redis_key)

    if task_result:
        task_data = json.loads(task_result)
        return {
            "task_id": task_id,
            "status": task_data.get("status"),
            "result": task_data.get("result")
        }

    return {"task_id": task_id, "status": task.status}

@router.get("/results/{task_id}", response_model=ResultsResponse, response_model_exclude_none=True)
async def get_results(task_id: str, only_dead: bool = False):
    """Retrieve all results stored in Redis for the given task_id."""
    past_results = redis_client.lrange(task_id, 0, -1)

    if not past_results:
        return {
            "task_id": task_id,
            "results": [],
            "message": "No results found yet."
        }

    results = [LinkCheckResult(**json.loads(r)) for r in past_results]
    if only_dead:
        results = [r for r in results if r.status != "valid"]

    checked = [r for r in results if r.status != "error"]
    valid = sum(1 for r in checked if r.status == "valid")
    summary = SummaryModel(total=len(checked), valid=valid, invalid=len(checked) - valid)
    return {"task_id": task_id, "summary": summary, "results": results}

@router.get("/status/stream/{task_id}")
async def status_stream(task_id: str):
    """Stream task status updates to the client using Server-Sent Events (SSE)."""
    async def event_generator():
        last_status = None

        while True:
            task = AsyncResult(task_id, app=celery_app)
            new_status = task.status

            if new_status != last_status:
                last_status = new_status
                yield {"data": json.dumps({'task_id': task_id, 'status': new_status})}

            if new_status in FINISHED_STATES:
                break

            await asyncio.sleep(1)

    return EventSourceResponse(event_generator())
