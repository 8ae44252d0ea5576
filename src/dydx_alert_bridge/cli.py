from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
import uvicorn
from pydantic import ValidationError

from dydx_alert_bridge.engine.trader import AlertTrader
from dydx_alert_bridge.exchange.base import ExchangeConnectionError, OrderPlacementError
from dydx_alert_bridge.logging_utils import configure_logging
from dydx_alert_bridge.notifications import TelegramNotifier
from dydx_alert_bridge.runtime import build_notifier, build_trader
from dydx_alert_bridge.settings import Settings
from dydx_alert_bridge.types import Alert, AlertError
from dydx_alert_bridge.webhook import create_app

app = typer.Typer(no_args_is_help=True, add_completion=False)
logger = logging.getLogger("dydx_alert_bridge")


def _load_alert(path: Path) -> Alert:
    if not path.exists():
        raise typer.BadParameter(f"alert file not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return Alert.model_validate(raw)
    except (json.JSONDecodeError, ValidationError) as e:
        raise typer.BadParameter(f"invalid alert: {e}") from e


def _build_trader(settings: Settings, notifier: TelegramNotifier | None = None) -> AlertTrader:
    try:
        return build_trader(settings, notifier=notifier)
    except FileNotFoundError as e:
        raise typer.BadParameter(f"config file not found: {settings.config_path}") from e
    except (ValidationError, ValueError) as e:
        raise typer.BadParameter(f"invalid config: {e}") from e


@app.command()
def config_init(
    path: Path = typer.Option(Path(".env"), help="Path to write a starter .env file."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Overwrite if exists."),
) -> None:
    """
    Create a starter `.env` file (copy from `.env.example`).
    """
    example_path = Path(".env.example")
    if not example_path.exists():
        raise typer.Exit(code=2)

    if path.exists() and not overwrite:
        raise typer.Exit(code=1)

    path.write_text(example_path.read_text(encoding="utf-8"), encoding="utf-8")
    typer.echo(f"Wrote {path}")


@app.command()
def show_config() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    redacted = settings.model_dump(mode="json")
    redacted["dydx_mnemonic"] = "***" if redacted["dydx_mnemonic"] else ""
    redacted["webhook_passphrase"] = "***" if redacted["webhook_passphrase"] else ""
    redacted["telegram_bot_token"] = "***" if redacted["telegram_bot_token"] else ""
    logger.info("loaded_config", extra={"network": settings.network})
    typer.echo(redacted)


@app.command()
def account() -> None:
    """
    Print the subaccount snapshot and whether it has free collateral.
    """
    settings = Settings()
    configure_logging(settings.log_level)
    trader = _build_trader(settings)

    async def _run() -> None:
        sub = await trader.get_sub_account()
        if sub is None:
            typer.echo({"ok": False, "account_ready": False})
            raise typer.Exit(code=1)
        typer.echo(
            {
                "ok": True,
                "address": sub.address,
                "subaccount_number": sub.subaccount_number,
                "equity": str(sub.equity),
                "free_collateral": str(sub.free_collateral),
                "account_ready": sub.free_collateral > 0,
            }
        )

    asyncio.run(_run())


@app.command()
def orders() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    trader = _build_trader(settings)

    async def _run() -> None:
        rows = await trader.get_orders()
        if rows is None:
            typer.echo({"ok": False, "orders": []})
            raise typer.Exit(code=1)
        for o in rows:
            typer.echo(f"{o.client_id}\t{o.id}\t{o.market}\t{o.side}\t{o.size}\t{o.status}")

    asyncio.run(_run())


@app.command()
def order_status(
    client_id: str = typer.Argument(..., help="Client id returned by `place`."),
) -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    trader = _build_trader(settings)
    filled = asyncio.run(trader.is_order_filled(client_id))
    typer.echo({"client_id": client_id, "filled": filled})


@app.command()
def place(
    alert: Path = typer.Option(..., "--alert", help="Alert JSON file (same shape as the webhook)."),
) -> None:
    """
    Place an order sequence (entry, take-profit, stop-loss) from an alert file.
    """
    settings = Settings()
    configure_logging(settings.log_level)
    parsed = _load_alert(alert)

    async def _run() -> None:
        notifier = build_notifier(settings)
        try:
            trader = _build_trader(settings, notifier)
            result = await trader.place_order(parsed)
        except AlertError as e:
            raise typer.BadParameter(str(e)) from e
        except (OrderPlacementError, ExchangeConnectionError) as e:
            typer.echo({"ok": False, "error": str(e)})
            raise typer.Exit(code=1) from e
        finally:
            await notifier.aclose()
        if result is None:
            typer.echo({"ok": False, "error": "wallet is not configured"})
            raise typer.Exit(code=1)
        typer.echo(
            {
                "ok": True,
                "side": result.side,
                "size": str(result.size),
                "order_id": result.order_id,
                "take_profit_id": result.take_profit_id,
                "stop_loss_id": result.stop_loss_id,
            }
        )

    asyncio.run(_run())


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
) -> None:
    """
    Run the webhook server that turns alerts into orders.
    """
    settings = Settings()
    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
