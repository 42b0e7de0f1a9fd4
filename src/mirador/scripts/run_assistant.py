"""
CLI del explorador de propiedades.

Uso:
    python -m mirador.scripts.run_assistant ask "industrial in Texas over 5 million"
    python -m mirador.scripts.run_assistant search austin
    python -m mirador.scripts.run_assistant save prop-001
    python -m mirador.scripts.run_assistant compare prop-001 prop-004
    python -m mirador.scripts.run_assistant statuses
"""

import argparse
import asyncio
import sys
from typing import Optional

import structlog

from mirador.analysis import trust_score_label
from mirador.app import AssistantShell
from mirador.config import get_settings
from mirador.logging_config import configure_logging
from mirador.portfolio import load_properties, status_counts
from mirador.storage import JsonFileStore

logger = structlog.get_logger()


def _print_properties(properties) -> None:
    if not properties:
        print("Sin resultados.")
        return
    for item in properties:
        price = f"${item.numeric_price:,.0f}" if item.numeric_price is not None else "N/A"
        print(f"- [{item.id}] {item.title} | {item.address} | {item.type} | {price} | {item.status}")
    print(f"\n{len(properties)} resultados")


async def _ask(shell: AssistantShell, question: str) -> int:
    response = await shell.ask(question)
    print(response.answer)
    print(
        f"\nConfianza: {response.confidence:g}/100 "
        f"({trust_score_label(response.confidence)})"
    )
    if response.sources:
        print("Fuentes:")
        for source in response.sources:
            print(f"  - {source.name} [{source.type}] {source.url}")
            if source.snippet:
                print(f"    {source.snippet}")
    return 0


def _run_onboarding(shell: AssistantShell) -> int:
    wizard = shell.onboarding()
    if wizard.completed:
        print("El onboarding ya fue completado.")
        return 0
    while not wizard.completed:
        step = wizard.current
        print(f"\n[{wizard.progress:.0%}] {step.title}")
        print(step.description)
        for feature in step.features:
            print(f"  • {feature}")
        answer = input("\nEnter para continuar, 's' para saltear: ").strip().lower()
        if answer == "s":
            wizard.skip()
        else:
            wizard.next()
    print("Onboarding completado.")
    return 0


def run_command(shell: AssistantShell, args: argparse.Namespace) -> int:
    command = args.command

    if command == "ask":
        return asyncio.run(_ask(shell, " ".join(args.question)))

    if command == "search":
        _print_properties(shell.search(" ".join(args.query)))
        return 0

    if command == "save":
        shell.get_property(args.property_id)
        shell.saved_repo.save(args.property_id, notes=args.notes, tags=args.tag)
        print(f"Propiedad {args.property_id} guardada.")
        return 0

    if command == "unsave":
        shell.saved_repo.unsave(args.property_id)
        print(f"Propiedad {args.property_id} quitada de guardados.")
        return 0

    if command == "saved":
        _print_properties(shell.saved_properties())
        return 0

    if command == "compare":
        rows = shell.compare(args.property_ids)
        fields = ["title", "type", "class", "status", "price", "sqft", "price_per_sqft",
                  "occupancy", "trust_score"]
        for field in fields:
            values = " | ".join(str(row.get(field) if row.get(field) is not None else "-") for row in rows)
            print(f"{field:>15}: {values}")
        return 0

    if command == "alerts":
        alerts = shell.alerts()
        if not alerts:
            print("Sin alertas.")
        for alert in alerts:
            mark = " " if alert.read else "*"
            print(f"{mark} [{alert.id}] {alert.property_id} ({alert.type}): {alert.message}")
        if args.mark_read:
            shell.mark_alert_read(args.mark_read)
        return 0

    if command == "statuses":
        for status, count in status_counts(shell.properties).items():
            print(f"{status:>12}: {count}")
        return 0

    if command == "login":
        user = shell.login(args.email, args.name)
        print(f"Bienvenido, {user.name}!")
        return 0

    if command == "logout":
        shell.logout()
        print("Sesión cerrada.")
        return 0

    if command == "onboarding":
        if args.reset:
            shell.onboarding_repo.reset()
        return _run_onboarding(shell)

    raise ValueError(f"Comando no soportado: {command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Explorador de propiedades con asistente IA")
    parser.add_argument("--properties", help="Dataset JSON (default: settings.properties_path)")
    parser.add_argument("--storage", help="Archivo del store local (default: settings.storage_path)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ask = subparsers.add_parser("ask", help="Preguntar al asistente")
    ask.add_argument("question", nargs="+")

    search = subparsers.add_parser("search", help="Buscar por título, dirección o tipo")
    search.add_argument("query", nargs="*", default=[])

    save = subparsers.add_parser("save", help="Guardar una propiedad")
    save.add_argument("property_id")
    save.add_argument("--notes")
    save.add_argument("--tag", action="append", default=[])

    unsave = subparsers.add_parser("unsave", help="Quitar una propiedad de guardados")
    unsave.add_argument("property_id")

    subparsers.add_parser("saved", help="Listar propiedades guardadas")

    compare = subparsers.add_parser("compare", help="Comparar 2 a 4 propiedades")
    compare.add_argument("property_ids", nargs="+")

    alerts = subparsers.add_parser("alerts", help="Listar alertas")
    alerts.add_argument("--mark-read", help="ID de alerta a marcar como leída")

    subparsers.add_parser("statuses", help="Distribución de estados del catálogo")

    login = subparsers.add_parser("login", help="Login demo")
    login.add_argument("--email", required=True)
    login.add_argument("--name", required=True)

    subparsers.add_parser("logout", help="Cerrar sesión")

    onboarding = subparsers.add_parser("onboarding", help="Recorrer el onboarding")
    onboarding.add_argument("--reset", action="store_true")

    return parser


def main(argv: Optional[list[str]] = None):
    """Entry point del script."""
    settings = get_settings()
    configure_logging(settings.log_level)

    args = build_parser().parse_args(argv)

    try:
        properties = load_properties(args.properties or settings.properties_path)
        store = JsonFileStore(args.storage or settings.storage_path)
        with AssistantShell(store, properties, settings=settings) as shell:
            exit_code = run_command(shell, args)
        sys.exit(exit_code)

    except KeyboardInterrupt:
        logger.info("Interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal", command=args.command, error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
