"""Shared text helpers for order templates."""


def format_items(items) -> str:
    return "\n".join(
        f"- {item.product_title} x {item.quantity} @ {item.unit_price:.2f}" for item in items
    )


def format_address(address: dict) -> str:
    if not address:
        return "N/A"
    parts = [address.get("street"), address.get("city"), address.get("state"), address.get("zip_code")]
    line = ", ".join(part for part in parts if part)
    return f"{address.get('name', '')}\n{line}\nPhone: {address.get('phone', '')}"
