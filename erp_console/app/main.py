from __future__ import annotations

import getpass
from dataclasses import dataclass, field
from typing import Callable

from erp_console.app.config import AppConfig, ConfigError
from erp_console.app.error_presenter import build_error_payload, print_error_banner
from erp_console.app.infrastructure.logging.logger import get_logger
from erp_console.app.navigation_shell import find_item, render_shell, resolve_route
from erp_console.app.session_guard import SessionGuard
from erp_console.app.state import AuthSession, SessionStateError
from erp_console.app.ui.permission_map import ModuleAccessPolicy
from erp_console.app.ui.table_state import TableConfig
from erp_console.app.ui.views.departments_view import DepartmentsView
from erp_console.app.ui.views.employees_view import EmployeesView
from erp_console.app.ui.views.invoices_view import InvoicesView
from erp_console.clients.backend_sdk.auth_client import AuthClient
from erp_console.clients.backend_sdk.auth_store import AuthStore
from erp_console.clients.backend_sdk.employees_client import DepartmentsClient, EmployeesClient
from erp_console.clients.backend_sdk.errors import ApiError
from erp_console.clients.backend_sdk.http_client import HttpClient
from erp_console.clients.backend_sdk.invoices_client import InvoicesClient

logger = get_logger(__name__)

ListingView = InvoicesView | EmployeesView | DepartmentsView
PROMPT = "Go to path (/invoice/list, /hrms/employees, /hrms/departments), export, logout, exit: "


@dataclass
class Runtime:
    config: AppConfig
    http_client: HttpClient
    hrms_http_client: HttpClient
    session: AuthSession
    views: dict[str, ListingView] = field(default_factory=dict)
    current: ListingView | None = None

    def table_config(self) -> TableConfig:
        return TableConfig(page_size=self.config.table_page_size)

    def reset_views(self) -> None:
        self.views.clear()
        self.current = None


def _http_client(config: AppConfig, base_url: str, transport) -> HttpClient:
    return HttpClient(
        base_url=base_url,
        api_key=config.anon_key,
        timeout_seconds=config.timeout_seconds,
        verify_ssl=config.verify_ssl,
        retry_max_attempts=config.retry_max_attempts,
        retry_backoff_ms=config.retry_backoff_ms,
        transport=transport,
    )


def build_runtime(config: AppConfig, store: AuthStore | None = None, transport=None) -> Runtime:
    http_client = _http_client(config, config.backend_url, transport)
    session = AuthSession(
        provider=AuthClient(http_client),
        policy=ModuleAccessPolicy.default(),
        store=store if store is not None else AuthStore(backend_url=config.backend_url),
    )
    return Runtime(
        config=config,
        http_client=http_client,
        hrms_http_client=_http_client(config, config.hrms_url or config.backend_url, transport),
        session=session,
    )


def open_invoices(runtime: Runtime) -> InvoicesView:
    view = runtime.views.get("invoices")
    if not isinstance(view, InvoicesView):
        client = InvoicesClient(runtime.http_client)
        view = runtime.views["invoices"] = InvoicesView(client, runtime.session, runtime.table_config())
    view.client.access_token = runtime.session.access_token
    return view


def open_employees(runtime: Runtime) -> EmployeesView:
    view = runtime.views.get("employees")
    if not isinstance(view, EmployeesView):
        client = EmployeesClient(runtime.hrms_http_client)
        view = runtime.views["employees"] = EmployeesView(client, runtime.session, runtime.table_config())
    view.client.access_token = runtime.session.access_token
    return view


def open_departments(runtime: Runtime) -> DepartmentsView:
    view = runtime.views.get("departments")
    if not isinstance(view, DepartmentsView):
        client = DepartmentsClient(runtime.hrms_http_client)
        view = runtime.views["departments"] = DepartmentsView(client, runtime.session, runtime.table_config())
    view.client.access_token = runtime.session.access_token
    return view


ROUTE_VIEWS: dict[str, Callable[[Runtime], ListingView]] = {
    "/invoice": open_invoices,
    "/invoice/list": open_invoices,
    "/hrms": open_employees,
    "/hrms/employees": open_employees,
    "/hrms/departments": open_departments,
}


def open_route(runtime: Runtime, path: str, guard: SessionGuard) -> ListingView | None:
    """Resolve a path and render its listing; the view is kept for later commands."""
    allowed, message = resolve_route(path, runtime.session)
    if not allowed:
        print(f"[denied] {message}")
        return None
    opener = ROUTE_VIEWS.get(path)
    item = find_item(path)
    if opener is None or item is None:
        print(f"[info] Nothing to list at {path}")
        return None
    if not guard.require_session(runtime.session, item.module):
        return None
    view = opener(runtime)
    view.render()
    runtime.current = view
    return view


def export_current(runtime: Runtime) -> None:
    view = runtime.current
    if view is None or not hasattr(view, "export"):
        print("[empty] Open an exportable listing first.")
        return
    view.export()


def _login(session: AuthSession) -> None:
    email = input("Email: ").strip()
    password = getpass.getpass("Password: ")
    try:
        user = session.login(email, password)
    except (ApiError, SessionStateError) as error:
        print_error_banner(build_error_payload(error))
        session.clear_error()
        return
    print(f"Welcome, {user.display_name}")


def main() -> None:
    try:
        config = AppConfig.from_env()
    except ConfigError as error:
        print_error_banner(build_error_payload(error))
        return

    runtime = build_runtime(config)
    logger.info("console_start backend=%s", config.backend_url)
    session = runtime.session
    session.restore()
    guard = SessionGuard(on_invalid_session=lambda reason: print(f"[session] {reason}"))

    while True:
        if not session.is_authenticated():
            runtime.reset_views()
            session.clear_error()
            _login(session)
            if not session.is_authenticated():
                if input("Retry login? [Y/n]: ").strip().lower() == "n":
                    return
                continue

        render_shell(session=session)
        command = input(PROMPT).strip()
        if command == "exit":
            return
        if command == "export":
            export_current(runtime)
            continue
        if command == "logout":
            runtime.reset_views()
            try:
                session.logout()
            except ApiError as error:
                print_error_banner(build_error_payload(error))
            continue
        open_route(runtime, command, guard)


if __name__ == "__main__":
    main()
