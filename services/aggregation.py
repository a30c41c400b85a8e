"""Agrupación y sumas de registros de turno.

Tres agrupaciones:
- por sucursal (resumen global / resumen por sucursal)
- por (fecha, sucursal) (resumen diario)
- por cuenta (reporte de depósitos)

Regla: primero se suman los montos crudos y después se aplican las fórmulas de
services.calculations sobre las sumas (total_vendido, total_meta, faltante...).
Los totales generales se obtienen sumando las filas de grupo, nunca volviendo a
recorrer los registros.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from services import calculations as calc
from services.calculations import ZERO

logger = logging.getLogger(__name__)

# Sumas acumuladas en cada grupo
SUMMED_FIELDS = (
    "total_depositado",
    "total_tarjeta",
    "total_sistema",
    "total_gastos",
    "total_canjes",
    "total_no_facturado",
)

SIN_SUCURSAL = "Sin sucursal"


@dataclass
class Totals:
    total_depositado: Decimal = ZERO
    total_tarjeta: Decimal = ZERO
    total_sistema: Decimal = ZERO
    total_gastos: Decimal = ZERO
    total_canjes: Decimal = ZERO
    total_no_facturado: Decimal = ZERO
    registros: int = 0

    def add_record(self, record) -> None:
        monto = calc.to_money(record.monto_depositado)
        account = getattr(record, "account", None)

        self.total_depositado += monto
        self.total_tarjeta += calc.to_money(record.venta_tarjeta)
        self.total_sistema += calc.to_money(record.total_sistema)
        self.total_gastos += calc.to_money(record.gastos)
        self.total_canjes += calc.to_money(record.canjes)
        self.total_no_facturado += calc.no_facturado(monto, bool(account is not None and account.is_special))
        self.registros += 1

    def add(self, other: "Totals") -> None:
        for name in SUMMED_FIELDS:
            setattr(self, name, getattr(self, name) + getattr(other, name))
        self.registros += other.registros

    # Derivados sobre las sumas
    @property
    def total_ventas(self) -> Decimal:
        return calc.total_ventas(self.total_depositado, self.total_tarjeta)

    @property
    def total_facturado(self) -> Decimal:
        return calc.total_facturado(self.total_depositado, self.total_tarjeta)

    @property
    def total_vendido(self) -> Decimal:
        return calc.total_vendido(self.total_sistema, self.total_gastos, self.total_canjes)

    @property
    def total_meta(self) -> Decimal:
        return calc.total_meta(self.total_sistema, self.total_gastos, self.total_canjes)

    @property
    def faltante(self) -> Decimal:
        return calc.faltante(self.total_sistema, self.total_depositado, self.total_tarjeta, self.total_gastos)

    @property
    def tiene_faltante(self) -> bool:
        return calc.has_shortage(self.faltante)

    def amounts(self) -> dict:
        data = {name: getattr(self, name) for name in SUMMED_FIELDS}
        data.update(
            total_ventas=self.total_ventas,
            total_facturado=self.total_facturado,
            total_vendido=self.total_vendido,
            total_meta=self.total_meta,
            faltante=self.faltante,
            tiene_faltante=self.tiene_faltante,
        )
        return data


@dataclass(kw_only=True)
class BranchGroup(Totals):
    branch_id: int
    branch_name: str
    fechas: set[date] = field(default_factory=set)

    @property
    def dias_con_ventas(self) -> int:
        return len(self.fechas)


@dataclass(kw_only=True)
class DayBranchGroup(Totals):
    fecha: date
    branch_id: int
    branch_name: str

    @property
    def key(self) -> tuple[date, int]:
        return (self.fecha, self.branch_id)


@dataclass
class AccountGroup:
    account_id: int
    number: str
    name: str
    bank: str
    is_special: bool
    total_depositado: Decimal = ZERO
    cantidad_depositos: int = 0


@dataclass
class AccountSummary:
    groups: list[AccountGroup]
    deposits: list
    total_general: Decimal = ZERO
    total_cuentas_normales: Decimal = ZERO
    total_cuentas_especiales: Decimal = ZERO


def _branch_name(record) -> str:
    branch = getattr(record, "branch", None)
    return branch.name if branch is not None else SIN_SUCURSAL


def group_by_branch(records: Iterable, order_by: str = "name") -> list[BranchGroup]:
    """Sumas por sucursal.

    order_by="name" ordena alfabéticamente por nombre de sucursal (reportes);
    order_by="id" por id de sucursal.
    """
    groups: dict[int, BranchGroup] = {}
    for r in records:
        g = groups.get(r.branch_id)
        if g is None:
            g = groups[r.branch_id] = BranchGroup(branch_id=r.branch_id, branch_name=_branch_name(r))
        g.add_record(r)
        g.fechas.add(r.fecha)

    if order_by == "id":
        keys = sorted(groups)
    else:
        keys = sorted(groups, key=lambda k: (groups[k].branch_name.lower(), k))

    logger.debug("group_by_branch: %d grupos", len(keys))
    return [groups[k] for k in keys]


def group_by_day_and_branch(records: Iterable) -> list[DayBranchGroup]:
    """Sumas por (fecha, sucursal), ordenadas por fecha y luego id de sucursal."""
    groups: dict[tuple[date, int], DayBranchGroup] = {}
    for r in records:
        key = (r.fecha, r.branch_id)
        g = groups.get(key)
        if g is None:
            g = groups[key] = DayBranchGroup(fecha=r.fecha, branch_id=r.branch_id, branch_name=_branch_name(r))
        g.add_record(r)

    logger.debug("group_by_day_and_branch: %d grupos", len(groups))
    return [groups[k] for k in sorted(groups)]


def is_reportable_deposit(record) -> bool:
    """Depósito que entra al reporte por cuenta: con cuenta y monto > 0."""
    return record.account_id is not None and getattr(record, "account", None) is not None and (
        calc.to_money(record.monto_depositado) > 0
    )


def group_by_account(records: Iterable) -> AccountSummary:
    """Sumas de depósitos por cuenta.

    Excluye registros sin cuenta y con monto_depositado <= 0. Los totales
    (general, normales, especiales) se suman desde las filas por cuenta.
    """
    groups: dict[int, AccountGroup] = {}
    deposits = []
    for r in records:
        if not is_reportable_deposit(r):
            continue
        acc = r.account
        g = groups.get(acc.id)
        if g is None:
            g = groups[acc.id] = AccountGroup(
                account_id=acc.id,
                number=acc.number,
                name=acc.name,
                bank=acc.bank,
                is_special=bool(acc.is_special),
            )
        g.total_depositado += calc.to_money(r.monto_depositado)
        g.cantidad_depositos += 1
        deposits.append(r)

    summary = AccountSummary(groups=[groups[k] for k in sorted(groups)], deposits=deposits)
    for g in summary.groups:
        summary.total_general += g.total_depositado
        if g.is_special:
            summary.total_cuentas_especiales += g.total_depositado
        else:
            summary.total_cuentas_normales += g.total_depositado

    logger.debug("group_by_account: %d cuentas, %d depósitos", len(summary.groups), len(deposits))
    return summary


def grand_total(groups: Iterable[Totals]) -> Totals:
    """Fila TOTAL GENERAL: suma de las filas de grupo."""
    total = Totals()
    for g in groups:
        total.add(g)
    return total
