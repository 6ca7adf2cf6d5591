"""Send one payment webhook to the orders service.

Useful for manual payment-status changes and duplicate-webhook testing.
"""

import argparse
import json

import httpx


def main() -> None:
    """Parse CLI args and POST one webhook payload."""

    parser = argparse.ArgumentParser(description="POST a payment status webhook to the orders service.")
    parser.add_argument("--orders-url", default="http://localhost:8002")
    parser.add_argument("--order-id", required=True)
    parser.add_argument("--payment-id", required=True)
    parser.add_argument("--status", default="PAID")
    parser.add_argument("--repeat", type=int, default=1, help="Send the same webhook N times")
    args = parser.parse_args()

    payload = {"status": args.status, "orderId": args.order_id, "paymentId": args.payment_id}
    with httpx.Client(base_url=args.orders_url, timeout=10.0) as client:
        for _ in range(args.repeat):
            resp = client.post("/api/webhook/payment", json=payload)
            print(resp.status_code, json.dumps(resp.json()))


if __name__ == "__main__":
    main()
