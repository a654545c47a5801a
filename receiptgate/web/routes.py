from __future__ import annotations

import logging
from typing import Dict, Optional

from aiohttp import BodyPartReader, web

from receiptgate.config import Settings
from receiptgate.services.downloads import (
    artifact_filename,
    authorize_download,
    query_status,
    resolve_artifact,
)
from receiptgate.services.intake import IntakeResult, ReceiptMetadata, submit
from receiptgate.services.notifications import Notifier
from receiptgate.services.receipts import (
    ReceiptTooLarge,
    StoredReceipt,
    remove_receipt_file,
    save_receipt_part,
)
from receiptgate.store.base import SubmissionStore

logger = logging.getLogger(__name__)

SETTINGS_KEY = web.AppKey("settings", Settings)
STORE_KEY = web.AppKey("store", SubmissionStore)
NOTIFIER_KEY = web.AppKey("notifier", Notifier)

RECEIPT_FIELD = "receipt"
TEXT_FIELDS = {"name", "email", "amount", "autokey"}
TEXT_FIELD_MAX_BYTES = 64 * 1024

routes = web.RouteTableDef()


class FieldTooLarge(Exception):
    pass


async def _read_text_field(part: BodyPartReader) -> str:
    data = bytearray()
    while True:
        chunk = await part.read_chunk()
        if not chunk:
            break
        data.extend(chunk)
        if len(data) > TEXT_FIELD_MAX_BYTES:
            raise FieldTooLarge(part.name)
    return data.decode(part.get_charset(default="utf-8"), errors="replace")


async def _read_upload_form(
    request: web.Request, settings: Settings
) -> tuple[Dict[str, str], Optional[StoredReceipt]]:
    fields: Dict[str, str] = {}
    receipt: Optional[StoredReceipt] = None
    if request.content_type != "multipart/form-data":
        return fields, None
    try:
        reader = await request.multipart()
        while True:
            part = await reader.next()
            if part is None:
                break
            if not isinstance(part, BodyPartReader):
                continue
            if part.name == RECEIPT_FIELD and part.filename is not None and receipt is None:
                receipt = await save_receipt_part(part, settings.upload_dir, max_bytes=settings.max_upload_bytes)
            elif part.name in TEXT_FIELDS and part.filename is None:
                fields[part.name] = await _read_text_field(part)
            else:
                await part.release()
    except BaseException:
        # A receipt saved before the failing part has no record to own it
        if receipt is not None:
            remove_receipt_file(receipt.path)
        raise
    return fields, receipt


@routes.post("/upload")
@routes.post("/api/upload")
async def upload_receipt(request: web.Request) -> web.Response:
    settings = request.app[SETTINGS_KEY]
    try:
        fields, receipt = await _read_upload_form(request, settings)
    except ReceiptTooLarge:
        await request.release()
        # Validation failures keep the 200 + success:false contract
        return web.json_response(IntakeResult(success=False, message="File too large").to_json())
    except (FieldTooLarge, web.HTTPRequestEntityTooLarge):
        await request.release()
        return web.json_response(IntakeResult(success=False, message="Field too large").to_json())
    result = await submit(
        request.app[STORE_KEY],
        request.app[NOTIFIER_KEY],
        ReceiptMetadata(
            name=fields.get("name"),
            email=fields.get("email"),
            amount=fields.get("amount"),
            autokey=fields.get("autokey"),
        ),
        receipt,
        auto_approve_key=settings.auto_approve_key,
    )
    return web.json_response(result.to_json())


@routes.get("/status")
@routes.get("/api/status")
async def submission_status(request: web.Request) -> web.Response:
    return web.json_response(query_status(request.app[STORE_KEY], request.query.get("id")))


@routes.get("/download/{id}/{token}")
async def download_artifact(request: web.Request) -> web.StreamResponse:
    submission_id = request.match_info["id"]
    if not authorize_download(request.app[STORE_KEY], submission_id, request.match_info["token"]):
        logger.info("download denied", extra={"extra": {"id": submission_id}})
        return web.Response(status=403, text="Access denied / not approved")
    settings = request.app[SETTINGS_KEY]
    path = resolve_artifact(settings)
    if path is None:
        logger.error("gated artifact missing", extra={"extra": {"path": settings.download_file_path}})
        return web.Response(status=404, text="File not found")
    logger.info("download granted", extra={"extra": {"id": submission_id}})
    return web.FileResponse(
        path,
        headers={"Content-Disposition": f'attachment; filename="{artifact_filename(settings, path)}"'},
    )


@routes.get("/healthz")
async def healthz(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "submissions": len(request.app[STORE_KEY])})
