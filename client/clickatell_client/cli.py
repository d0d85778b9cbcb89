import argparse
import json
import os
import sys

from .api import API
from .config import APIConfig, SendOptions, configure, get_default_config_path
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def write_file(path: str, data: bytes, mode: int = 0o600) -> None:
    with open(path, 'wb') as f:
        f.write(data)
    try:
        os.chmod(path, mode)
    except OSError:
        # Ignore chmod issues on non-POSIX
        pass


def load_config(args: argparse.Namespace) -> APIConfig:
    """Load the config file and apply command line mode overrides"""
    config = APIConfig.load(args.config)
    if args.secure:
        config.secure_mode = True
    if args.debug:
        config.debug_mode = True
    if args.test:
        config.test_mode = True
    return configure(config)


def connect(config: APIConfig) -> API:
    if not config.has_credentials():
        raise ValueError("api_id, user and password must be set in the config file")
    return API.login(config.api_id, config.user, config.password, config=config)


def cmd_init(args: argparse.Namespace) -> int:
    """Create a config file holding credentials and defaults"""
    config_path = args.config or get_default_config_path()

    if os.path.exists(config_path) and not args.force:
        print(f"Config file already exists: {config_path}")
        print("Use --force to overwrite existing files")
        return 1

    config = APIConfig(
        service_host=args.host,
        api_id=args.api_id,
        user=args.user,
        password=args.password,
        sender=args.sender,
    )

    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
        data = json.dumps(config.to_dict(), indent=2).encode("utf-8")
        write_file(config_path, data, 0o600)
    except OSError as e:
        print(f"Failed to create config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config file: {config_path}")
    return 0


def cmd_send(args: argparse.Namespace) -> int:
    """Send a message to one or more recipients"""
    try:
        config = load_config(args)
        options = SendOptions(
            sender=args.sender or config.sender,
            callback=args.callback,
            client_message_id=args.client_message_id,
            concat=args.concat,
        )
        recipients = [r.strip() for r in args.recipients.split(",") if r.strip()]

        with connect(config) as api:
            message_ids = api.send_message(recipients, args.message, options)

            for recipient, message_id in message_ids.items():
                print(f"{recipient}: {message_id}")
            if config.test_mode:
                for request in api.sms_requests:
                    print(f"[test] {request.url}")
        return 0
    except Exception as e:
        logger.debug("send failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_status(args: argparse.Namespace) -> int:
    """Print the status of a sent message"""
    try:
        config = load_config(args)
        with connect(config) as api:
            print(api.message_status(args.message_id))
        return 0
    except Exception as e:
        logger.debug("status query failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_balance(args: argparse.Namespace) -> int:
    """Print the remaining account credit"""
    try:
        config = load_config(args)
        with connect(config) as api:
            print(api.account_balance())
        return 0
    except Exception as e:
        logger.debug("balance query failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="clickatell-sms", description="Send SMS messages through the Clickatell HTTP API")
    p.add_argument("--config", default=None, help="Config file path (default: $CLICKATELL_CONFIG or XDG_CONFIG_HOME/clickatell/config.json)")
    p.add_argument("--secure", action="store_true", help="Use HTTPS for all requests")
    p.add_argument("--debug", action="store_true", help="Log every request URL (passwords masked)")
    p.add_argument("--test", action="store_true", help="Record requests instead of sending them")
    p.add_argument("--log-level", default=None, help="Logging level (default: $LOG_LEVEL or WARNING)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="Create a config file", description="Create a config file holding gateway credentials.")
    p_init.add_argument("--api-id", required=True, help="Gateway API id")
    p_init.add_argument("--user", required=True, help="Account user name")
    p_init.add_argument("--password", required=True, help="Account password")
    p_init.add_argument("--from", dest="sender", default=None, help="Default sender id")
    p_init.add_argument("--host", default=None, help="Custom service host (default: api.clickatell.com)")
    p_init.add_argument("--force", action="store_true", help="Overwrite an existing config file")
    p_init.set_defaults(func=cmd_init)

    p_send = sub.add_parser("send", help="Send a message", description="Send a message to one or more comma-separated recipients.")
    p_send.add_argument("recipients", help="Recipient phone number(s), comma separated")
    p_send.add_argument("message", help="Message to send")
    p_send.add_argument("--from", dest="sender", default=None, help="Sender id (overrides config)")
    p_send.add_argument("--callback", type=int, default=None, help="Delivery callback type")
    p_send.add_argument("--client-message-id", default=None, help="Client message id")
    p_send.add_argument("--concat", type=int, default=None, help="Number of concatenated parts (default: computed from length)")
    p_send.set_defaults(func=cmd_send)

    p_status = sub.add_parser("status", help="Query message status", description="Print the gateway status code of a sent message.")
    p_status.add_argument("message_id", help="Gateway message id")
    p_status.set_defaults(func=cmd_status)

    p_balance = sub.add_parser("balance", help="Query account balance", description="Print the remaining credit on the account.")
    p_balance.set_defaults(func=cmd_balance)

    return p


def main(argv=None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    log_level = args.log_level
    if args.debug and log_level is None:
        log_level = "INFO"
    setup_logging(log_level)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
