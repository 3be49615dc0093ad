from __future__ import annotations

import argparse
import json
import time
from urllib import request
from urllib.error import HTTPError


def post_json(url: str, payload: dict) -> tuple[int, dict]:
    data = json.dumps(payload).encode("utf-8")
    req = request.Request(
        url=url,
        data=data,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with request.urlopen(req, timeout=10) as resp:
            return resp.status, json.loads(resp.read().decode("utf-8"))
    except HTTPError as error:
        return error.code, json.loads(error.read().decode("utf-8"))


def build_payload(args: argparse.Namespace) -> dict:
    return {
        "userId": args.user_id,
        "deviceId": args.device_id,
        "alert": {
            "notification_type": "ml_detection",
            "detected_objects": args.objects,
            "risk_label": args.risk,
            "predicted_risk": args.risk.lower(),
            "description": [args.description] if args.description else [],
            "device_identifier": args.device_identifier or args.device_id,
            "timestamp": int(time.time()),
            "model_version": args.model_version,
            "confidence_score": args.confidence,
        },
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a sample device alert")
    parser.add_argument("--api-base", default="http://127.0.0.1:8000")
    parser.add_argument("--user-id", required=True, help="Sending account id")
    parser.add_argument("--device-id", required=True)
    parser.add_argument("--device-identifier", default="")
    parser.add_argument(
        "--risk",
        default="High",
        choices=["Low", "Medium", "High", "Critical"],
    )
    parser.add_argument("--objects", nargs="+", default=["person"])
    parser.add_argument("--description", default="Motion detected near entrance")
    parser.add_argument("--model-version", default="v1")
    parser.add_argument("--confidence", type=float, default=0.9)
    args = parser.parse_args()

    status, response = post_json(f"{args.api_base}/api/alerts", build_payload(args))
    print(f"[HTTP {status}]")
    print(json.dumps(response, indent=2, ensure_ascii=False))
    if status >= 400:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
