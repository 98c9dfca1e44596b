"""
Amount in words (pt-BR), e.g. 1250.50 -> "mil duzentos e cinquenta reais e cinquenta centavos".
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_UNIDADES = ["", "um", "dois", "três", "quatro", "cinco", "seis", "sete", "oito", "nove"]
_DEZ_A_DEZENOVE = [
    "dez", "onze", "doze", "treze", "quatorze", "quinze",
    "dezesseis", "dezessete", "dezoito", "dezenove",
]
_DEZENAS = [
    "", "", "vinte", "trinta", "quarenta", "cinquenta",
    "sessenta", "setenta", "oitenta", "noventa",
]
_CENTENAS = [
    "", "cento", "duzentos", "trezentos", "quatrocentos", "quinhentos",
    "seiscentos", "setecentos", "oitocentos", "novecentos",
]


def _below_thousand(num: int) -> str:
    if num == 0:
        return ""
    if num == 100:
        return "cem"

    c, rest = divmod(num, 100)
    d, u = divmod(rest, 10)

    parts: list[str] = []
    if c:
        parts.append(_CENTENAS[c])
    if d == 1:
        parts.append(_DEZ_A_DEZENOVE[u])
    else:
        if d:
            parts.append(_DEZENAS[d])
        if u:
            parts.append(_UNIDADES[u])
    return " e ".join(parts)


def _integer_in_words(num: int) -> str:
    millions, rest = divmod(num, 1_000_000)
    thousands, units = divmod(rest, 1000)

    groups: list[tuple[int, str]] = []
    if millions:
        groups.append((millions, "um milhão" if millions == 1 else f"{_below_thousand(millions)} milhões"))
    if thousands:
        groups.append((thousands, "mil" if thousands == 1 else f"{_below_thousand(thousands)} mil"))
    if units:
        groups.append((units, _below_thousand(units)))

    words = [text for _, text in groups]
    last = groups[-1][0]
    if len(groups) > 1 and (last < 100 or last % 100 == 0):
        # "mil e cinquenta", "um milhão e quinhentos mil"
        return " ".join(words[:-1]) + " e " + words[-1]
    return " ".join(words)


def amount_in_words(valor: float) -> str:
    """Spell out a BRL amount. Cents are rounded half-up."""
    cents_total = int(
        (Decimal(str(valor)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    )
    reais, centavos = divmod(cents_total, 100)

    if reais == 0 and centavos == 0:
        return "zero reais"

    parts: list[str] = []
    if reais:
        words = _integer_in_words(reais)
        if reais % 1_000_000 == 0:
            # "um milhão de reais"
            words += " de"
        parts.append(f"{words} {'real' if reais == 1 else 'reais'}")
    if centavos:
        parts.append(
            f"{_below_thousand(centavos)} {'centavo' if centavos == 1 else 'centavos'}"
        )
    return " e ".join(parts)
