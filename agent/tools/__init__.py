from .device_messaging import DeviceMessagingClient, DisabledDeviceMessaging, build_device_messaging

__all__ = ["DeviceMessagingClient", "DisabledDeviceMessaging", "build_device_messaging"]
