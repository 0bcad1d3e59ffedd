# app.py
import base64, binascii, logging, re

from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException

from dpi_check import analyze_image, analyze_many, check_placement
from dpi_check.config import load_settings
from dpi_check.guards import finite_pos, num

settings = load_settings()

app = Flask(__name__)
app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length

logger = logging.getLogger("dpi_check.app")

DATA_URL = re.compile(r"^data:([^;,]*)(;[^,]*)?,(.*)$", re.S)

# ======================================================
# ---------------------- INPUT -------------------------
# ======================================================

def read_params():
    """Normalize params from JSON or multipart form."""
    params = {}
    if request.is_json:
        params = request.get_json(silent=True) or {}
    else:
        params = {k: request.form.get(k) for k in request.form.keys()}
    if not isinstance(params, dict):
        return {}

    # Sanitize obviously bad literals early
    for k, v in list(params.items()):
        if isinstance(v, str) and v.strip().lower() in ("inf", "infinity", "+inf", "-inf", "nan"):
            params[k] = None
    return params

def decode_data_url(s):
    """(mime, bytes) from a data URL or bare base64; (None, None) if unreadable."""
    s = s.strip()
    mime = ""
    m = DATA_URL.match(s)
    if m:
        mime, s = m.group(1), m.group(3)
    elif s.startswith("data:"):
        return None, None
    s = "".join(s.split())
    pad = (-len(s)) % 4
    if pad:
        s += "=" * pad
    try:
        return mime, base64.b64decode(s, validate=False)
    except (binascii.Error, ValueError):
        return None, None

def read_upload(params):
    """(bytes, declared_format) from a multipart file or a data_url param."""
    f = request.files.get("file")
    if f:
        return f.read(), f.mimetype or ""
    b64 = params.get("data_url")
    if isinstance(b64, str):
        return decode_data_url(b64)
    return None, None

# ======================================================
# ---------------------- ROUTES ------------------------
# ======================================================

@app.route("/dpi-check", methods=["POST"])
def dpi_check():
    try:
        params = read_params()
        data, fmt = read_upload(params)
        if not data:
            return jsonify({"ok": False, "error": "no_data"}), 400

        fmt = str(params.get("format") or fmt or "")
        size = num(params.get("file_size"), None)
        size = int(size) if size is not None and size >= 0 else len(data)

        result = analyze_image(data, size, fmt, timeout=settings.decode_timeout_s)
        body = {"ok": True, **result.to_dict()}

        pw = finite_pos(params.get("print_width_in"))
        ph = finite_pos(params.get("print_height_in"))
        if pw and ph:
            meta = result.metadata
            body["placement"] = check_placement(meta.width, meta.height, pw, ph)._asdict()

        return jsonify(body), 200

    except HTTPException:
        # e.g. 413 from MAX_CONTENT_LENGTH
        raise
    except Exception as e:
        # Never leak stack traces to clients
        logger.exception("dpi-check request failed")
        return jsonify({"ok": False, "error": str(e)}), 500

@app.route("/dpi-check/batch", methods=["POST"])
def dpi_check_batch():
    try:
        items = []
        for f in request.files.getlist("files"):
            data = f.read()
            if data:
                items.append((data, len(data), f.mimetype or ""))
        if not items:
            return jsonify({"ok": False, "error": "no_data"}), 400

        results = analyze_many(items, max_workers=settings.batch_workers,
                               timeout=settings.decode_timeout_s)
        return jsonify({"ok": True, "results": [r.to_dict() for r in results]}), 200

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("dpi-check batch request failed")
        return jsonify({"ok": False, "error": str(e)}), 500

@app.route("/healthz", methods=["GET"])
def healthz():
    return jsonify({"ok": True})

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # debug=False for production safety
    app.run(host="0.0.0.0", port=settings.port, debug=False)
