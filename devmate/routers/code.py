from typing import Optional, Tuple

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from devmate.services import assist_service, execution_service
from devmate.utils.dependencies import AppSettings, Gemini, Judge0

router = APIRouter(tags=["code"])


class CodeRequest(BaseModel):
    code: Optional[str] = None
    language: Optional[str] = None


def require_code_and_language(request: CodeRequest) -> Tuple[str, str]:
    code = request.code or ""
    language = (request.language or "").strip()
    if not code.strip() or not language:
        raise HTTPException(status_code=400, detail="Code and language required")
    return code, language


@router.post("/explain")
async def explain(request: CodeRequest, client: Gemini):
    """Explain code in plain language"""
    code, language = require_code_and_language(request)

    success, result, status_code = await assist_service.explain_code(client, code, language)
    if not success:
        raise HTTPException(status_code=status_code, detail=result)

    return result


@router.post("/improve")
async def improve(request: CodeRequest, client: Gemini):
    """Return an improved version of the code, or the no-correction sentinel"""
    code, language = require_code_and_language(request)

    success, result, status_code = await assist_service.improve_code(client, code, language)
    if not success:
        raise HTTPException(status_code=status_code, detail=result)

    return result


@router.post("/execute")
async def execute(request: CodeRequest, client: Judge0, settings: AppSettings):
    """
    Run code on Judge0 and wait for the result

    Returns:
        output (compile error, runtime error or stdout, in that order),
        Judge0 status description, submission token and the raw payload
    """
    code, language = require_code_and_language(request)

    success, result, status_code = await execution_service.execute_code(
        client,
        code,
        language,
        poll_interval=settings.poll_interval_seconds,
        timeout=settings.poll_timeout_seconds,
    )
    if not success:
        raise HTTPException(status_code=status_code, detail=result)

    return result
