"""Attach a LogglyHandler to the root logger and ship a few records.

Run with ``LOGGLY_CUSTOMER_TOKEN`` set in the environment.
"""
import logging

from logship.adapters.logging import LogglyHandler
from logship.config import EnvSettingsLoader, ShipperSettings
from logship.observability.context import HostContext
from logship.shipper import Shipper


def main() -> None:
    settings = EnvSettingsLoader().load(ShipperSettings)
    handler = LogglyHandler(
        Shipper(settings, on_failure=lambda f: print(f"delivery failed: {f.error.message}")),
        capacity=10,
    )
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(handler)

    with HostContext.scope(remote_addr="203.0.113.10"):
        logging.getLogger("shop.checkout").info({"order": 1042, "total": "19.90"})
    logging.getLogger("shop.checkout").warning("payment gateway slow: %sms", 870)
    try:
        1 / 0
    except ZeroDivisionError:
        logging.getLogger("shop.checkout").exception("total computation failed")

    handler.close()


if __name__ == "__main__":
    main()
