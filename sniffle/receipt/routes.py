# sniffle/receipt/routes.py
import os

from flask import current_app, jsonify, request, send_file

from .sniff import SNIFF_LEN, detect_content_type
from .storage import InvalidReceiptName
from . import bp

FORM_FIELD = "receipt"


# ---------- helpers ----------
def _receipts():
    return current_app.extensions["receipt_directory"]

def _empty(status):
    return "", status


# ---------- routes ----------
# GET /receipts
@bp.get("")
def list_receipts():
    try:
        names = _receipts().list()
    except OSError:
        current_app.logger.exception("listing receipts failed")
        return _empty(500)
    return jsonify(names)


# POST /receipts  (multipart, file field "receipt")
@bp.post("")
def upload_receipt():
    # oversized bodies raise 413 here, before anything touches the disk
    upload = request.files.get(FORM_FIELD)
    if upload is None or not upload.filename:
        current_app.logger.warning("upload rejected: no %r file field", FORM_FIELD)
        return _empty(500)

    try:
        _receipts().save(upload.filename, upload.stream)
    except InvalidReceiptName as e:
        current_app.logger.warning("upload rejected: %s", e)
        return _empty(400)
    except OSError:
        current_app.logger.exception("storing receipt %r failed", upload.filename)
        return _empty(500)

    current_app.logger.info("stored receipt %s", upload.filename)
    return _empty(201)


# GET /receipts/<filename>
@bp.get("/<path:filename>")
def download_receipt(filename):
    if "/" in filename:
        return _empty(400)

    try:
        fh = _receipts().open(filename)
    except InvalidReceiptName as e:
        current_app.logger.warning("download rejected: %s", e)
        return _empty(400)
    except OSError:
        return _empty(404)

    try:
        content_type = detect_content_type(fh.read(SNIFF_LEN))
        size = os.fstat(fh.fileno()).st_size
        fh.seek(0)
    except OSError:
        fh.close()
        current_app.logger.exception("reading receipt %r failed", filename)
        return _empty(500)

    resp = send_file(
        fh,
        mimetype=content_type,
        as_attachment=True,
        download_name=filename,
        conditional=False,
        etag=False,
    )
    # send_file appends a charset to text/* types; keep the sniffed value as is
    resp.headers["Content-Type"] = content_type
    resp.content_length = size
    try:
        # honours a single Range header with 206 + Content-Range
        return resp.make_conditional(request, accept_ranges=True, complete_length=size)
    except Exception:
        fh.close()
        raise
