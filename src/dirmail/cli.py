"""Command line entry point for dirmail."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .composer import MessageComposer
from .config import TRANSPORTS, Settings, load_settings
from .dispatcher import BatchDispatcher
from .exceptions import ConfigurationError, DirmailError
from .logging import setup_logging
from .report import ReportEmitter
from .transports import BaseTransport, MailAppTransport, MockTransport, SendGridTransport, SMTPTransport

logger = logging.getLogger(__name__)


def create_transport(settings: Settings) -> BaseTransport:
    """Create the transport named in the settings.

    Args:
        settings: Loaded settings

    Returns:
        Transport instance

    Raises:
        ConfigurationError: If the transport is unknown or lacks credentials
    """
    name = settings.transport.lower()
    if name == "mail":
        mail = settings.mail
        return MailAppTransport(
            osascript_path=mail.osascript_path,
            settle_seconds=mail.settle_seconds,
            attach_timeout=mail.attach_timeout,
            poll_interval=mail.poll_interval,
            timeout=mail.timeout,
            empty_response_is_success=mail.empty_response_is_success,
        )
    elif name == "smtp":
        smtp = settings.smtp
        if not smtp.host:
            raise ConfigurationError("SMTP host not provided. Set DIRMAIL_SMTP__HOST or smtp.host in the config file")
        try:
            return SMTPTransport(
                host=smtp.host,
                port=smtp.port,
                username=smtp.username,
                password=smtp.password,
                use_ssl=smtp.use_ssl,
                use_starttls=smtp.use_starttls,
                timeout=smtp.timeout,
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
    elif name == "sendgrid":
        if not settings.sendgrid.api_key:
            raise ConfigurationError(
                "SendGrid API key not provided. Set DIRMAIL_SENDGRID__API_KEY or sendgrid.api_key in the config file"
            )
        return SendGridTransport(api_key=settings.sendgrid.api_key)
    elif name == "mock":
        return MockTransport()
    else:
        raise ConfigurationError(f"Unknown transport: {settings.transport}")


@click.command()
@click.argument("sender")
@click.option("-s", "--subject", default=None, help="Subject of every message [default: attached file]")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory of recipient subdirectories [default: current directory]",
)
@click.option("--transport", type=click.Choice(TRANSPORTS, case_sensitive=False), default=None, help="Transport to send with")
@click.option("--settle-seconds", type=float, default=None, help="Mail app wait between attaching and sending")
@click.option("--body", default=None, help="Body template, may use {{ subject }}")
@click.option("-v", "--verbose", is_flag=True, help="Also print successful sends")
@click.option("--output", type=click.Path(dir_okay=False), help="Write the report as JSON to this file")
@click.option("--config", type=click.Path(exists=True, dir_okay=False), help="Config file path (YAML/JSON)")
@click.option("--env-file", type=click.Path(exists=True, dir_okay=False), help=".env file path")
@click.option("--fail-on-error", is_flag=True, help="Exit with status 1 if any recipient failed")
@click.option("--log-level", default=None, help="Logging level")
def main(
    sender: str,
    subject: Optional[str],
    root: Optional[Path],
    transport: Optional[str],
    settle_seconds: Optional[float],
    body: Optional[str],
    verbose: bool,
    output: Optional[str],
    config: Optional[str],
    env_file: Optional[str],
    fail_on_error: bool,
    log_level: Optional[str],
):
    """Email one file from each subdirectory to the address the subdirectory is named after.

    SENDER is the account to send from.
    """
    try:
        settings = load_settings(
            env_file=env_file,
            config_file=config,
            subject=subject,
            transport=transport,
            body_template=body,
            verbose=verbose or None,
            fail_on_error=fail_on_error or None,
            mail={"settle_seconds": settle_seconds} if settle_seconds is not None else None,
            logging={"level": log_level} if log_level else None,
        )
        setup_logging(settings.logging)

        email_transport = create_transport(settings)
        if not email_transport.validate_connection():
            logger.warning(f"Transport {email_transport.name} did not validate, sends may fail")

        dispatcher = BatchDispatcher(
            transport=email_transport,
            composer=MessageComposer(settings.body_template),
        )
        report = dispatcher.run(root or Path.cwd(), sender, settings.subject)

        emitter = ReportEmitter(verbose=settings.verbose)
        for line in emitter.render(report):
            click.echo(line)
        click.echo(emitter.summary(report))

        if output:
            try:
                with open(output, "w") as f:
                    json.dump(report.to_dict(), f, indent=2)
            except OSError as e:
                raise ConfigurationError(f"Cannot write report to {output}: {e}") from e
            click.echo(f"Report saved to: {output}")

        sys.exit(1 if settings.fail_on_error and report.has_failures else 0)

    except DirmailError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
