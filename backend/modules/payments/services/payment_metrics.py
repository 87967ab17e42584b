# backend/modules/payments/services/payment_metrics.py

from prometheus_client import Counter

# Payment intent counters
payment_intent_total = Counter(
    "payment_intent_total",
    "Payment intent requests by outcome",
    ["result"],  # created / reissued / gateway_error
)

# Notification counters
payment_notification_total = Counter(
    "payment_notification_total",
    "Gateway notifications processed",
    ["transaction_status", "result"],  # applied / unchanged
)

payment_signature_failure_total = Counter(
    "payment_signature_failure_total",
    "Gateway notifications rejected for a bad signature",
)

order_transition_skipped_total = Counter(
    "order_transition_skipped_total",
    "Gateway outcomes that could not move the order",
    ["from_status", "to_status"],
)
