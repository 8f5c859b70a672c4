"""
Performance Reporting Service.

The one entry point every reporting surface calls: the dashboard cards,
the performance list and the salesperson detail page all read their
numbers from here, so the figures reconcile across views.

Records arrive from the data-access layer either as models or as raw
mappings (camelCase or snake_case); raw mappings are validated into
models before aggregation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Optional, TypeVar, Union

from minersales.config import AppConfig
from minersales.logger import StructuredLogger
from minersales.models.enums import Period, SortKey
from minersales.models.expense import ExpenseRecord
from minersales.models.sale import SaleRecord
from minersales.models.sales_person import SalesPerson
from minersales.models.service_models import (
    DashboardReport,
    PerformanceReport,
    SaleLine,
    SalesPersonDetail,
    ServiceResult,
)
from minersales.services.aggregator import (
    aggregate,
    filter_records,
    most_recent,
    rollup,
    sort_summaries,
)
from minersales.services.base_service import BaseService
from minersales.services.period_filter import (
    available_month_keys,
    resolve_period_range,
)
from minersales.services.sale_economics import compute_sale_economics

M = TypeVar("M", SaleRecord, ExpenseRecord, SalesPerson)

SaleInput = Union[SaleRecord, Mapping[str, object]]
ExpenseInput = Union[ExpenseRecord, Mapping[str, object]]
SalesPersonInput = Union[SalesPerson, Mapping[str, object]]


def _as_models(model: type[M], items: Optional[Iterable[object]]) -> list[M]:
    """Validate raw mappings into *model*; models pass through untouched."""
    return [
        item if isinstance(item, model) else model.from_raw(item)
        for item in (items or [])
    ]


class PerformanceService(BaseService):
    """
    Service layer for salesperson performance and compensation reports.

    Stateless apart from its configuration: each call recomputes every
    figure from the records it is given.
    """

    def __init__(
        self,
        config: AppConfig,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._config = config

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _invalid_request(self, action: str, exc: ValueError) -> ServiceResult:
        self._logger.warning("Rejected %s request: %s", action, exc)
        return ServiceResult(success=False, error=str(exc), status_code=400)

    def _unexpected_failure(self, action: str, exc: Exception) -> ServiceResult:
        self._logger.error(
            "Failed to compute %s: %s", action, exc, exc_info=True,
        )
        return ServiceResult(
            success=False,
            error=f"Error computing {action}: {exc}",
            status_code=500,
        )

    # ------------------------------------------------------------------
    # Performance list
    # ------------------------------------------------------------------

    def get_performance_list(
        self,
        sales_persons: Iterable[SalesPersonInput],
        sales: Iterable[SaleInput],
        expenses: Iterable[ExpenseInput],
        period: Union[Period, str] = Period.MONTH,
        month_key: Optional[str] = None,
        sort_by: Union[SortKey, str, None] = None,
        now: Optional[datetime] = None,
    ) -> ServiceResult:
        """
        Per-salesperson summaries and their totals for one period.

        Args:
            sales_persons: Salesperson master records.
            sales: Sale records.
            expenses: Expense records.
            period: ``month``, ``last``, ``life`` or ``custom``.
            month_key: ``YYYY-MM``, required for ``custom``.
            sort_by: ``name`` (default), ``revenue``, ``profit``,
                     ``margin`` or ``expense``.
            now: Reference time; defaults to the current local time.

        Returns:
            ServiceResult with a ``PerformanceReport``; status 400 for an
            invalid period, month key, sort key or master record.
        """
        reference: datetime = now if now is not None else datetime.now()
        try:
            summaries = aggregate(
                _as_models(SalesPerson, sales_persons),
                _as_models(SaleRecord, sales),
                _as_models(ExpenseRecord, expenses),
                period,
                month_key=month_key,
                now=reference,
                config=self._config,
                logger=self._logger,
            )
            ordered = sort_summaries(summaries, sort_by)
            report = PerformanceReport(
                period=Period(period).value,
                month_key=month_key if Period(period) is Period.CUSTOM else None,
                range=resolve_period_range(period, month_key, reference),
                summaries=ordered,
                rollup=rollup(ordered),
            )
        except ValueError as exc:
            return self._invalid_request("performance list", exc)
        except Exception as exc:
            return self._unexpected_failure("performance list", exc)

        self._logger.info(
            "Performance list built",
            extra={
                "period": report.period,
                "month_key": report.month_key,
                "salespeople": len(report.summaries),
                "sort_by": sort_by or SortKey.NAME.value,
            },
        )
        return ServiceResult(success=True, data=report)

    # ------------------------------------------------------------------
    # Salesperson detail
    # ------------------------------------------------------------------

    def get_salesperson_detail(
        self,
        sales_person_id: Union[str, int],
        sales_persons: Iterable[SalesPersonInput],
        sales: Iterable[SaleInput],
        expenses: Iterable[ExpenseInput],
        period: Union[Period, str] = Period.MONTH,
        month_key: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ServiceResult:
        """
        One salesperson's summary with the sale and expense rows behind it.

        Returns:
            ServiceResult with a ``SalesPersonDetail``; status 404 when the
            id is neither a known salesperson nor referenced by any record.
        """
        reference: datetime = now if now is not None else datetime.now()
        target: str = str(sales_person_id)
        try:
            sale_models = _as_models(SaleRecord, sales)
            expense_models = _as_models(ExpenseRecord, expenses)
            summaries = aggregate(
                _as_models(SalesPerson, sales_persons),
                sale_models,
                expense_models,
                period,
                month_key=month_key,
                now=reference,
                config=self._config,
                logger=self._logger,
            )
            summary = next((s for s in summaries if s.id == target), None)
            if summary is None:
                self._logger.warning("Salesperson %s not found", target)
                return ServiceResult(
                    success=False,
                    error=f"Salesperson {target} not found",
                    status_code=404,
                )

            period_range = resolve_period_range(period, month_key, reference)
            lines = [
                SaleLine(
                    sale=sale,
                    economics=compute_sale_economics(
                        sale, self._config.PREFERRED_VENDOR_CODE,
                    ),
                )
                for sale in filter_records(
                    sale_models, period_range, target, reference, self._logger,
                )
            ]
            detail = SalesPersonDetail(
                summary=summary,
                range=period_range,
                sales=lines,
                expenses=filter_records(
                    expense_models, period_range, target, reference, self._logger,
                ),
            )
        except ValueError as exc:
            return self._invalid_request("salesperson detail", exc)
        except Exception as exc:
            return self._unexpected_failure("salesperson detail", exc)

        self._logger.info(
            "Salesperson detail built",
            extra={
                "sales_person_id": target,
                "period": Period(period).value,
                "sale_lines": len(detail.sales),
                "expense_lines": len(detail.expenses),
            },
        )
        return ServiceResult(success=True, data=detail)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def get_dashboard_rollup(
        self,
        sales_persons: Iterable[SalesPersonInput],
        sales: Iterable[SaleInput],
        expenses: Iterable[ExpenseInput],
        period: Union[Period, str] = Period.LIFE,
        month_key: Optional[str] = None,
        now: Optional[datetime] = None,
        recent_limit: int = 5,
    ) -> ServiceResult:
        """
        Totals for the dashboard cards plus the latest sales and expenses.

        Uses the same aggregation as the performance list, so the cards
        always equal the sum of the per-salesperson rows.  Records with no
        salesperson are not counted in the totals but still appear in the
        activity feeds.

        Args:
            recent_limit: How many in-period sales and expenses to list,
                          newest first.

        Returns:
            ServiceResult with a ``DashboardReport``.
        """
        reference: datetime = now if now is not None else datetime.now()
        try:
            sale_models = _as_models(SaleRecord, sales)
            expense_models = _as_models(ExpenseRecord, expenses)
            summaries = aggregate(
                _as_models(SalesPerson, sales_persons),
                sale_models,
                expense_models,
                period,
                month_key=month_key,
                now=reference,
                config=self._config,
                logger=self._logger,
            )
            period_range = resolve_period_range(period, month_key, reference)
            in_period_sales = filter_records(
                sale_models, period_range, now=reference, logger=self._logger,
            )
            in_period_expenses = filter_records(
                expense_models, period_range, now=reference, logger=self._logger,
            )
            report = DashboardReport(
                totals=rollup(summaries),
                recent_sales=[
                    SaleLine(
                        sale=sale,
                        economics=compute_sale_economics(
                            sale, self._config.PREFERRED_VENDOR_CODE,
                        ),
                    )
                    for sale in most_recent(
                        in_period_sales, recent_limit, reference, self._logger,
                    )
                ],
                recent_expenses=most_recent(
                    in_period_expenses, recent_limit, reference, self._logger,
                ),
            )
        except ValueError as exc:
            return self._invalid_request("dashboard rollup", exc)
        except Exception as exc:
            return self._unexpected_failure("dashboard rollup", exc)

        self._logger.info(
            "Dashboard rollup built",
            extra={
                "period": Period(period).value,
                "sale_count": len(in_period_sales),
                "expense_count": len(in_period_expenses),
            },
        )
        return ServiceResult(success=True, data=report)

    def get_available_months(
        self,
        sales: Iterable[SaleInput],
        expenses: Iterable[ExpenseInput],
        now: Optional[datetime] = None,
    ) -> ServiceResult:
        """``YYYY-MM`` keys with activity, newest first, for the month picker."""
        try:
            records = [
                *_as_models(SaleRecord, sales),
                *_as_models(ExpenseRecord, expenses),
            ]
            keys: list[str] = available_month_keys(records, now)
        except ValueError as exc:
            return self._invalid_request("available months", exc)
        except Exception as exc:
            return self._unexpected_failure("available months", exc)

        return ServiceResult(success=True, data=keys)
