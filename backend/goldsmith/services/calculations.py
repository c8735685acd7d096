"""
Calcoli su pesi e percentuali
Progetto: Goldsmith Assistant (Gestionale Oreficeria)

Funzioni pure per i campi derivati di articoli e totali.
Gli input arrivano dai form come stringhe (anche vuote o non numeriche):
ogni valore non interpretabile vale 0. Gli arrotondamenti usano
ROUND_HALF_UP (metà lontano dallo zero).

Precisione:
- pesi: 3 decimali
- percentuali: 2 decimali
- importi: 2 decimali
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Iterable, Mapping

ZERO = Decimal("0")
HUNDRED = Decimal("100")

WEIGHT_QUANTUM = Decimal("0.001")
PERCENT_QUANTUM = Decimal("0.01")
AMOUNT_QUANTUM = Decimal("0.01")

# Valore assoluto massimo accettato per un campo numerico dei form
MAX_INPUT_VALUE = Decimal("1e12")

# Cifre significative usate per gli arrotondamenti
QUANTIZE_PRECISION = 50

STATUS_EMPTY = "empty"
STATUS_INCOMPLETE = "incomplete"
STATUS_COMPLETE = "complete"


# -------------------------------------------------------------------
# Parsing e arrotondamento
# -------------------------------------------------------------------

def to_decimal(value: Any) -> Decimal:
    """
    Converte un input numerico grezzo in Decimal.

    Accetta str, int, float, Decimal o None. Stringhe vuote, non numeriche,
    NaN e infiniti valgono 0. La virgola è accettata come separatore decimale.

    Examples:
        >>> to_decimal("10,5")
        Decimal('10.5')
        >>> to_decimal("abc")
        Decimal('0')
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return ZERO

    if not result.is_finite():
        return ZERO
    return result


class CalculationError(ValueError):
    """Risultato non rappresentabile con la precisione richiesta."""


def _quantize(value: Any, quantum: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = QUANTIZE_PRECISION
        try:
            return to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
        except InvalidOperation as e:
            raise CalculationError(f"Valore numerico fuori intervallo: {value}") from e


def round_weight(value: Any) -> Decimal:
    """Arrotonda un peso a 3 decimali."""
    return _quantize(value, WEIGHT_QUANTUM)


def round_percent(value: Any) -> Decimal:
    """Arrotonda una percentuale a 2 decimali."""
    return _quantize(value, PERCENT_QUANTUM)


def round_amount(value: Any) -> Decimal:
    """Arrotonda un importo a 2 decimali."""
    return _quantize(value, AMOUNT_QUANTUM)


# -------------------------------------------------------------------
# Articoli ricevuta cliente
# -------------------------------------------------------------------

def net_weight(gross_wt: Any, stone_wt: Any) -> Decimal:
    """Peso netto = lordo - pietre."""
    return round_weight(to_decimal(gross_wt) - to_decimal(stone_wt))


def final_weight(gross_wt: Any, stone_wt: Any, melting_touch: Any) -> Decimal:
    """Peso finale = netto x titolo / 100."""
    net = net_weight(gross_wt, stone_wt)
    return round_weight(net * to_decimal(melting_touch) / HUNDRED)


# -------------------------------------------------------------------
# Articoli ricevuta admin
# -------------------------------------------------------------------

def given_item_total(pure_weight: Any, pure_percent: Any, melting: Any) -> Decimal:
    """
    Totale di un articolo "dato": peso puro x percentuale / fusione.

    Con fusione pari a 0 il totale è 0 (nessuna eccezione).
    """
    melting_value = to_decimal(melting)
    if melting_value == ZERO:
        return round_weight(ZERO)
    return round_weight(to_decimal(pure_weight) * to_decimal(pure_percent) / melting_value)


def received_item_subtotal(final_ornaments_wt: Any, stone_weight: Any) -> Decimal:
    """Subtotale di un articolo "ricevuto": peso ornamenti - pietre."""
    return round_weight(to_decimal(final_ornaments_wt) - to_decimal(stone_weight))


def received_item_total(sub_total: Any, making_charge_percent: Any) -> Decimal:
    """Totale di un articolo "ricevuto": subtotale maggiorato della fattura (%)."""
    base = round_weight(sub_total)
    return round_weight(base + base * to_decimal(making_charge_percent) / HUNDRED)


# -------------------------------------------------------------------
# Righe complete e totali
# -------------------------------------------------------------------

def receipt_line(item: Mapping[str, Any]) -> dict[str, Decimal]:
    """
    Calcola i campi numerici di una riga ricevuta (input arrotondati + derivati).

    Args:
        item: dizionario con grossWt, stoneWt, meltingTouch, stoneAmt

    Returns:
        dict con grossWt, stoneWt, meltingTouch, stoneAmt, netWt, finalWt
    """
    gross = round_weight(item.get("grossWt"))
    stone = round_weight(item.get("stoneWt"))
    touch = round_percent(item.get("meltingTouch"))
    return {
        "grossWt": gross,
        "stoneWt": stone,
        "meltingTouch": touch,
        "stoneAmt": round_amount(item.get("stoneAmt")),
        "netWt": net_weight(gross, stone),
        "finalWt": final_weight(gross, stone, touch),
    }


def given_line(item: Mapping[str, Any]) -> dict[str, Decimal]:
    """Calcola i campi numerici di un articolo "dato"."""
    pure_weight = round_weight(item.get("pureWeight"))
    pure_percent = round_percent(item.get("purePercent"))
    melting = round_percent(item.get("melting"))
    return {
        "pureWeight": pure_weight,
        "purePercent": pure_percent,
        "melting": melting,
        "total": given_item_total(pure_weight, pure_percent, melting),
    }


def received_line(item: Mapping[str, Any]) -> dict[str, Decimal]:
    """Calcola i campi numerici di un articolo "ricevuto"."""
    ornaments = round_weight(item.get("finalOrnamentsWt"))
    stone = round_weight(item.get("stoneWeight"))
    making = round_percent(item.get("makingChargePercent"))
    sub_total = received_item_subtotal(ornaments, stone)
    return {
        "finalOrnamentsWt": ornaments,
        "stoneWeight": stone,
        "subTotal": sub_total,
        "makingChargePercent": making,
        "total": received_item_total(sub_total, making),
    }


def _sum(lines: Iterable[Mapping[str, Any]], field: str) -> Decimal:
    return sum((to_decimal(line.get(field)) for line in lines), ZERO)


def receipt_totals(lines: Iterable[Mapping[str, Any]]) -> dict[str, Decimal]:
    """Totali ricevuta: somma per colonna delle righe correnti."""
    lines = list(lines)
    return {
        "grossWt": round_weight(_sum(lines, "grossWt")),
        "stoneWt": round_weight(_sum(lines, "stoneWt")),
        "netWt": round_weight(_sum(lines, "netWt")),
        "finalWt": round_weight(_sum(lines, "finalWt")),
        "stoneAmt": round_amount(_sum(lines, "stoneAmt")),
    }


def given_totals(lines: Iterable[Mapping[str, Any]]) -> dict[str, Decimal]:
    lines = list(lines)
    return {
        "pureWeight": round_weight(_sum(lines, "pureWeight")),
        "total": round_weight(_sum(lines, "total")),
    }


def received_totals(lines: Iterable[Mapping[str, Any]]) -> dict[str, Decimal]:
    lines = list(lines)
    return {
        "finalOrnamentsWt": round_weight(_sum(lines, "finalOrnamentsWt")),
        "stoneWeight": round_weight(_sum(lines, "stoneWeight")),
        "subTotal": round_weight(_sum(lines, "subTotal")),
        "total": round_weight(_sum(lines, "total")),
    }


def admin_balance(given_total: Any, received_total: Any) -> Decimal:
    """Differenza dato - ricevuto."""
    return round_weight(to_decimal(given_total) - to_decimal(received_total))


def admin_status(given_count: int, received_count: int) -> str:
    """
    Stato di una ricevuta admin.

    empty: nessuna sezione compilata; complete: entrambe; incomplete: una sola.
    """
    if given_count and received_count:
        return STATUS_COMPLETE
    if given_count or received_count:
        return STATUS_INCOMPLETE
    return STATUS_EMPTY


def is_blank_item(item: Mapping[str, Any], fields: Iterable[str]) -> bool:
    """True se tutti i campi di input della riga sono vuoti."""
    for field in fields:
        value = item.get(field)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return False
    return True


def to_json_numbers(values: Mapping[str, Decimal]) -> dict[str, float]:
    """Converte i Decimal arrotondati in numeri JSON per la persistenza."""
    return {key: float(value) for key, value in values.items()}
