"""
    **Module Utils**
     - Common Application Utilities**
"""
import socket
from datetime import datetime


def is_development(config_instance) -> bool:
    """True when running on the configured development host"""
    return config_instance().DEVELOPMENT_SERVER_NAME.casefold() == socket.gethostname().casefold()


def local_timestamp(when: datetime) -> str:
    """
        **local_timestamp**
            human readable local time used in notification emails

    :param when: aware or naive datetime
    :return: e.g. 10/19/2026, 01:22:05 PM
    """
    if when.tzinfo is not None:
        when = when.astimezone()
    return when.strftime("%m/%d/%Y, %I:%M:%S %p")
