"""playstore CLI application with Typer."""

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, TypeVar

import click
import typer

from playstore import __version__
from playstore.app.adapters import CredentialsError, PublisherAPIError
from playstore.app.purchase_service import PUBLISHER_FEATURE, PublisherNotConfiguredError
from playstore.bootstrap import bootstrap_application, bootstrap_receipt_verification
from playstore.config import get_settings, set_settings
from playstore.signature import SignatureStructureError
from playstore.utils.offline import OfflineModeGate

if TYPE_CHECKING:
    from playstore.app.ports import ProductPurchase, SubscriptionPurchase
    from playstore.bootstrap import ApplicationContainer

T = TypeVar("T")

app = typer.Typer(
    name="playstore",
    help="Google Play in-app purchase validation",
    add_completion=True,
    no_args_is_help=True,
)
product_app = typer.Typer(help="One-time product purchases (Developer API)")
subscription_app = typer.Typer(help="Subscription purchases (Developer API)")
app.add_typer(product_app, name="product")
app.add_typer(subscription_app, name="subscription")

EXIT_INVALID = 1
EXIT_STRUCTURAL = 2

PackageOption = Annotated[
    str | None,
    typer.Option("--package", "-p", help="Application package name (defaults to PLAYSTORE_PACKAGE_NAME)"),
]
PayloadOption = Annotated[
    str | None,
    typer.Option("--developer-payload", help="Developer payload attached to the acknowledgement"),
]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"playstore version {__version__}")
        raise typer.Exit()


def require_online(gate: OfflineModeGate, feature_name: str) -> None:
    """Enforce that ``feature_name`` may only run in online mode."""

    try:
        gate.require(feature_name)
    except RuntimeError as exc:
        typer.secho(f"\n{exc}\nAborting.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=EXIT_STRUCTURAL) from exc


def _bootstrap() -> "ApplicationContainer":
    """Wire the application, turning configuration errors into exit code 2."""

    try:
        return bootstrap_application()
    except (SignatureStructureError, CredentialsError, FileNotFoundError) as exc:
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_STRUCTURAL) from exc


def _resolve_package(container: "ApplicationContainer", package: str | None) -> str:
    resolved = package or container.settings.package_name
    if not resolved:
        typer.secho(
            "Error: package name required. Pass --package or set PLAYSTORE_PACKAGE_NAME.",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=EXIT_STRUCTURAL)
    return resolved


def _publisher_call(container: "ApplicationContainer", call: Callable[[], T]) -> T:
    """Run a Developer API call with CLI-friendly error reporting."""

    require_online(container.offline_gate, PUBLISHER_FEATURE)
    try:
        return call()
    except PublisherNotConfiguredError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_STRUCTURAL) from exc
    except PublisherAPIError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_INVALID) from exc


def _echo_record(record: "ProductPurchase | SubscriptionPurchase") -> None:
    typer.echo(json.dumps(record.model_dump(by_alias=True, exclude_none=True), indent=2))


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
    online: Annotated[
        bool,
        typer.Option("--online", help="Enable Google Play Developer API calls"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """playstore - Google Play in-app purchase validation."""
    # Update settings with CLI flags
    settings = get_settings()
    if online:
        settings.online = True
    set_settings(settings)

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("verify-signature")
def verify_signature_command(
    receipt: Annotated[
        str,
        typer.Argument(help="File holding the exact signed purchase data ('-' for stdin)"),
    ],
    signature: Annotated[
        str,
        typer.Option("--signature", "-s", help="Base64 signature from the billing client"),
    ],
    public_key: Annotated[
        str | None,
        typer.Option("--public-key", "-k", help="Base64 public key (defaults to PLAYSTORE_PUBLIC_KEY)"),
    ] = None,
) -> None:
    """Verify a purchase signature offline.

    Exit codes: 0 valid, 1 invalid signature, 2 malformed input.
    """

    try:
        service = bootstrap_receipt_verification(use_configured_key=public_key is None)
    except SignatureStructureError as exc:
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_STRUCTURAL) from exc

    if receipt == "-":
        receipt_bytes = click.get_binary_stream("stdin").read()
    else:
        receipt_path = Path(receipt).expanduser()
        if not receipt_path.is_file():
            typer.secho(f"Error: Path not found: {receipt_path}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=EXIT_STRUCTURAL)
        receipt_bytes = receipt_path.read_bytes()

    try:
        valid = service.verify_receipt(
            receipt_bytes, signature, public_key_b64=public_key
        )
    except (SignatureStructureError, PublisherNotConfiguredError) as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_STRUCTURAL) from exc

    if valid:
        typer.secho("✅ Signature is valid.", fg=typer.colors.GREEN)
    else:
        typer.secho("❌ Signature is invalid.", fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_INVALID)


@product_app.command("get")
def product_get(
    product_id: Annotated[str, typer.Argument(help="In-app product SKU")],
    token: Annotated[str, typer.Argument(help="Purchase token")],
    package: PackageOption = None,
) -> None:
    """Show the purchase and consumption status of a product."""

    container = _bootstrap()
    package_name = _resolve_package(container, package)
    service = container.purchase_service
    record = _publisher_call(
        container, lambda: service.get_product(package_name, product_id, token)
    )
    _echo_record(record)


@product_app.command("acknowledge")
def product_acknowledge(
    product_id: Annotated[str, typer.Argument(help="In-app product SKU")],
    token: Annotated[str, typer.Argument(help="Purchase token")],
    package: PackageOption = None,
    developer_payload: PayloadOption = None,
) -> None:
    """Acknowledge a product purchase."""

    container = _bootstrap()
    package_name = _resolve_package(container, package)
    service = container.purchase_service
    _publisher_call(
        container,
        lambda: service.acknowledge_product(
            package_name, product_id, token, developer_payload=developer_payload
        ),
    )
    typer.secho(f"✅ Acknowledged product {product_id}", fg=typer.colors.GREEN)


@subscription_app.command("get")
def subscription_get(
    subscription_id: Annotated[str, typer.Argument(help="Subscription id")],
    token: Annotated[str, typer.Argument(help="Purchase token")],
    package: PackageOption = None,
) -> None:
    """Show whether a subscription is valid and when it expires."""

    container = _bootstrap()
    package_name = _resolve_package(container, package)
    service = container.purchase_service
    record = _publisher_call(
        container, lambda: service.get_subscription(package_name, subscription_id, token)
    )
    _echo_record(record)


@subscription_app.command("acknowledge")
def subscription_acknowledge(
    subscription_id: Annotated[str, typer.Argument(help="Subscription id")],
    token: Annotated[str, typer.Argument(help="Purchase token")],
    package: PackageOption = None,
    developer_payload: PayloadOption = None,
) -> None:
    """Acknowledge a subscription purchase."""

    container = _bootstrap()
    package_name = _resolve_package(container, package)
    service = container.purchase_service
    _publisher_call(
        container,
        lambda: service.acknowledge_subscription(
            package_name, subscription_id, token, developer_payload=developer_payload
        ),
    )
    typer.secho(f"✅ Acknowledged subscription {subscription_id}", fg=typer.colors.GREEN)


@subscription_app.command("cancel")
def subscription_cancel(
    subscription_id: Annotated[str, typer.Argument(help="Subscription id")],
    token: Annotated[str, typer.Argument(help="Purchase token")],
    package: PackageOption = None,
) -> None:
    """Cancel a subscription; access continues until it expires."""

    container = _bootstrap()
    package_name = _resolve_package(container, package)
    service = container.purchase_service
    _publisher_call(
        container, lambda: service.cancel_subscription(package_name, subscription_id, token)
    )
    typer.secho(f"✅ Cancelled subscription {subscription_id}", fg=typer.colors.GREEN)


@subscription_app.command("refund")
def subscription_refund(
    subscription_id: Annotated[str, typer.Argument(help="Subscription id")],
    token: Annotated[str, typer.Argument(help="Purchase token")],
    package: PackageOption = None,
) -> None:
    """Refund a subscription; it stays valid and keeps recurring."""

    container = _bootstrap()
    package_name = _resolve_package(container, package)
    service = container.purchase_service
    _publisher_call(
        container, lambda: service.refund_subscription(package_name, subscription_id, token)
    )
    typer.secho(f"✅ Refunded subscription {subscription_id}", fg=typer.colors.GREEN)


@subscription_app.command("revoke")
def subscription_revoke(
    subscription_id: Annotated[str, typer.Argument(help="Subscription id")],
    token: Annotated[str, typer.Argument(help="Purchase token")],
    package: PackageOption = None,
) -> None:
    """Refund and revoke a subscription; access ends immediately."""

    container = _bootstrap()
    package_name = _resolve_package(container, package)
    service = container.purchase_service
    _publisher_call(
        container, lambda: service.revoke_subscription(package_name, subscription_id, token)
    )
    typer.secho(f"✅ Revoked subscription {subscription_id}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
