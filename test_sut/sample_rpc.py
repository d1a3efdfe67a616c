"""
Simple fake JSON-RPC node for trying out the latency tester locally.

    python test_sut/sample_rpc.py --port 8545 --latency-ms 20 --failure-rate 0.1
    rpc-latency run --url http://127.0.0.1:8545 --duration 3000
"""

import argparse
import random
import time

from flask import Flask, jsonify, request


def create_app(latency_ms: float = 0, jitter_ms: float = 0, failure_rate: float = 0.0) -> Flask:
    app = Flask(__name__)

    # State
    app.config["settings"] = {
        "latency_ms": latency_ms,
        "jitter_ms": jitter_ms,
        "failure_rate": failure_rate,
    }
    app.config["block"] = {"number": 0x10, "calls": 0}

    def _reply(payload: dict, result):
        return jsonify({"jsonrpc": "2.0", "id": payload.get("id"), "result": result})

    def _error(payload: dict, code: int, message: str):
        return jsonify({"jsonrpc": "2.0", "id": payload.get("id"), "error": {"code": code, "message": message}})

    @app.route("/", methods=["POST"])
    def rpc():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"jsonrpc": "2.0", "id": None,
                            "error": {"code": -32700, "message": "Parse error"}}), 400

        settings = app.config["settings"]
        block = app.config["block"]
        block["calls"] += 1

        # Simulate network and processing time
        delay = settings["latency_ms"] + random.uniform(0, settings["jitter_ms"])
        if delay > 0:
            time.sleep(delay / 1000)

        # Simulate random failure
        if settings["failure_rate"] and random.random() < settings["failure_rate"]:
            return jsonify({"error": "Random upstream failure"}), 503

        method = payload.get("method")
        if method == "eth_blockNumber":
            return _reply(payload, hex(block["number"]))
        if method == "eth_getBlockByNumber":
            block["number"] += 1
            return _reply(payload, {
                "number": hex(block["number"]),
                "timestamp": hex(int(time.time())),
                "transactions": [],
            })
        return _error(payload, -32601, f"Method {method} not found")

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "calls": app.config["block"]["calls"], "timestamp": time.time()})

    @app.route("/settings", methods=["POST"])
    def update_settings():
        data = request.json or {}
        unknown = set(data) - set(app.config["settings"])
        if unknown:
            return jsonify({"error": "ValidationError", "details": sorted(unknown)}), 400
        app.config["settings"].update(data)
        return jsonify(app.config["settings"])

    return app


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Fake JSON-RPC node")
    parser.add_argument("--port", type=int, default=8545)
    parser.add_argument("--latency-ms", type=float, default=0)
    parser.add_argument("--jitter-ms", type=float, default=0)
    parser.add_argument("--failure-rate", type=float, default=0.0)
    args = parser.parse_args()

    create_app(args.latency_ms, args.jitter_ms, args.failure_rate).run(port=args.port, threaded=True)
