"""Channel adapter registry.

One adapter instance per channel type, shared by every request thread. The
fake email adapter is installed on first use; deployments with a real mail
transport call ``register_channel`` at startup.
"""

import threading

from notifications.notification.notification import NotificationChannel

_channel_instances: dict[str, object] = {}
_registry_lock = threading.Lock()


def _default_adapter(channel_type: str):
    if channel_type == NotificationChannel.EMAIL.value:
        from notifications.channel.fake_email import FakeEmailAdapter

        return FakeEmailAdapter()
    raise ValueError(f"Unknown channel type: {channel_type}")


def get_channel(channel_type: str):
    """Return the adapter for a NotificationChannel value, creating it on first use."""
    with _registry_lock:
        adapter = _channel_instances.get(channel_type)
        if adapter is None:
            adapter = _channel_instances[channel_type] = _default_adapter(channel_type)
        return adapter


def register_channel(channel_type: str, adapter) -> None:
    """Install an adapter for a channel, replacing any existing one."""
    with _registry_lock:
        _channel_instances[channel_type] = adapter


def reset_channels() -> None:
    """Forget every adapter (used between tests)."""
    with _registry_lock:
        _channel_instances.clear()
