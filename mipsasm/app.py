# mipsasm/app.py
import io
import os
import logging

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS

from mipsasm.mips_assembler import MipsAssembler
from mipsasm.mips_batch import assemble_all, output_name
from mipsasm.mips_source import format_source

#logging.basicConfig(level=logging.DEBUG) # Use DEBUG for development
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["BATCH_MAX_WORKERS"] = int(os.environ.get("MIPSASM_BATCH_WORKERS", "4"))
# Upper bound on one assembled image, .space/.align can otherwise ask for up to 2 GiB
app.config["MAX_IMAGE_SIZE"] = int(os.environ.get("MIPSASM_MAX_IMAGE_SIZE", str(1 << 20)))
# Adjust CORS for your frontend origin if different
CORS(app, resources={r"/api/*": {"origins": os.environ.get("MIPSASM_CORS_ORIGINS", "http://localhost:3000")}})


def _json_result(result):
    """Drops the raw bytes (not JSON-serialisable) from an assembly result."""
    return {k: v for k, v in result.items() if k != "binary"}


@app.route('/')
def index():
    return "MIPS Assembler Backend is running!"


@app.route('/api/ping', methods=['GET'])
def ping():
    logger.debug("Ping endpoint called")
    return jsonify({"message": "pong"})


@app.route('/api/assemble', methods=['POST'])
def handle_assemble():
    try:
        data = request.get_json(silent=True)
        if not data or 'assembly' not in data:
            return jsonify({"errors": [{"message": "Missing 'assembly' key in request."}]}), 400
        assembly_code = data['assembly']
        file_name = data.get('file_name', "<input>")
        logger.debug(f"Received assembly for {file_name}: {assembly_code[:100]}...")
        # A fresh assembler per request, requests may run concurrently
        result = MipsAssembler(max_image_size=app.config["MAX_IMAGE_SIZE"]).assemble(assembly_code, file_name)
        if result['errors']:
            logger.warning(f"Assembly failed: {result['errors']}")
        return jsonify(_json_result(result))
    except Exception as e:
        logger.error(f"Error during assembly: {e}", exc_info=True)
        return jsonify({"errors": [{"message": f"Internal server error during assembly: {e}"}]}), 500


@app.route('/api/assemble/batch', methods=['POST'])
def handle_assemble_batch():
    """Assembles several files at once: {"files": {"name.asm": "source", ...}}."""
    try:
        data = request.get_json(silent=True)
        if not data or not isinstance(data.get('files'), dict):
            return jsonify({"errors": [{"message": "Missing/invalid 'files' key (must map file names to source)."}]}), 400
        jobs = [(name, format_source(source)) for name, source in sorted(data['files'].items())]
        results = assemble_all(jobs, max_workers=app.config["BATCH_MAX_WORKERS"],
                               max_image_size=app.config["MAX_IMAGE_SIZE"])
        return jsonify({"results": [{
            "file": r["file"],
            "output": output_name(r["file"]) if r["binary"] is not None else None,
            "hex": r["binary"].hex() if r["binary"] is not None else None,
            "errors": r["errors"],
            "warnings": r["warnings"],
        } for r in results]})
    except Exception as e:
        logger.error(f"Error during batch assembly: {e}", exc_info=True)
        return jsonify({"errors": [{"message": f"Internal server error during batch assembly: {e}"}]}), 500


@app.route('/api/export/binary', methods=['POST'])
def handle_export_binary():
    """Assembles the posted source and returns the raw image as a download."""
    try:
        data = request.get_json(silent=True)
        if not data or 'assembly' not in data:
            return jsonify({"errors": [{"message": "Missing 'assembly' key in request."}]}), 400
        file_name = data.get('file_name', "program.asm")
        result = MipsAssembler(max_image_size=app.config["MAX_IMAGE_SIZE"]).assemble(data['assembly'], file_name)
        if result['errors']:
            return jsonify(_json_result(result)), 400
        return send_file(io.BytesIO(result['binary']), mimetype="application/octet-stream",
                         as_attachment=True, download_name=output_name(file_name))
    except Exception as e:
        logger.error(f"Error during binary export: {e}", exc_info=True)
        return jsonify({"errors": [{"message": f"Internal server error during export: {e}"}]}), 500


if __name__ == '__main__':
    # Run with `python -m flask --app mipsasm.app run --port 5001` from the project root
    app.run(debug=False, port=5001) # Turn debug off for default run, rely on logging
