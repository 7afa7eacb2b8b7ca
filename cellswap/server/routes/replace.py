# cellswap/server/routes/replace.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from cellswap.core.errors import MissingInput
from cellswap.services.replacer import TargetFile, run_replacement
from cellswap.services.replacer.report import encode_report_header

from ..auth import password_matches, require_bearer

router = APIRouter(tags=["replace"])
log = logging.getLogger(__name__)

REPORT_HEADER = "X-Report-Header"


# ---------------------------
# helpers
# ---------------------------
async def _read_upload(item: object) -> Optional[TargetFile]:
    if not isinstance(item, UploadFile):
        return None
    data = await item.read()
    return TargetFile(name=item.filename or "upload.xlsx", data=data)


async def _read_uploads(items: List[object]) -> List[TargetFile]:
    files: List[TargetFile] = []
    for item in items:
        target = await _read_upload(item)
        if target is not None:
            files.append(target)
    return files


# ---------------------------
# routes
# ---------------------------
@router.post("/auth")
async def auth(request: Request):
    form = await request.form()
    secret = request.app.state.settings.auth_password
    if password_matches(form.get("password"), secret):
        return {"success": True}
    log.warning("Rejected password attempt from %s", request.client.host if request.client else "?")
    return JSONResponse(status_code=401, content={"success": False, "error": "Incorrect password"})


@router.post(
    "/process",
    response_class=Response,
    summary="Replace cell values across workbooks",
    description=(
        "multipart fields: targets (one or more workbooks), replacement (key/value workbook), "
        "mode ('full' for exact match, anything else for substring)"
    ),
)
async def process(request: Request):
    # password check comes before the body is parsed
    require_bearer(request.headers.get("Authorization"), request.app.state.settings.auth_password)

    form = await request.form()
    targets = await _read_uploads(form.getlist("targets"))
    replacement = await _read_upload(form.get("replacement"))
    mode = form.get("mode")
    if not targets or replacement is None:
        raise MissingInput("Missing files")

    log.info(
        "process: targets=%s replacement=%s mode=%s",
        [t.name for t in targets],
        replacement.name,
        mode,
    )
    result = await run_in_threadpool(
        run_replacement, targets, replacement, mode if isinstance(mode, str) else None
    )

    return Response(
        content=result.archive,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{result.archive_name}"',
            REPORT_HEADER: encode_report_header(result.report),
        },
    )
