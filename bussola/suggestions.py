"""
Check-in suggestions from historical patterns.

History is read newest first. Weekdays follow Python's convention
(Monday=0 .. Sunday=6).
"""

from collections import Counter
from datetime import date
from typing import Dict, List, Sequence, TypeVar

from bussola.config import DEFAULT_CONFIG, BussolaConfig
from bussola.entities import (
    CaixaStatus,
    Checkin,
    CheckinPattern,
    CheckinSuggestion,
    Energia,
    Pressao,
    WeekdayPattern,
)
from bussola.patterns import newest_first


T = TypeVar("T")

WEEKDAY_NAMES_PT = ("Segunda", "Terça", "Quarta", "Quinta", "Sexta", "Sábado", "Domingo")

CAIXA_WEIGHT = {CaixaStatus.TRANQUILO: 0.4, CaixaStatus.ATENCAO: 0.2, CaixaStatus.CRITICO: 0.0}
ENERGIA_WEIGHT = {Energia.ALTA: 0.35, Energia.MEDIA: 0.175, Energia.BAIXA: 0.0}
PRESSAO_WEIGHT = {Pressao.LEVE: 0.25, Pressao.NORMAL: 0.125, Pressao.ALTA: 0.0}


def mode(values: Sequence[T]) -> T:
    """Most common value; ties go to the value seen first."""
    return Counter(values).most_common(1)[0][0]


def _wellbeing(checkins: Sequence[Checkin]) -> float:
    if not checkins:
        return 0.5
    scores = [
        CAIXA_WEIGHT[c.caixa_status] + ENERGIA_WEIGHT[c.energia] + PRESSAO_WEIGHT[c.pressao]
        for c in checkins
    ]
    return sum(scores) / len(scores)


def wellbeing_score(caixa: float, energia: Energia, pressao: Pressao) -> int:
    """
    0-100 wellbeing from a 0-10 caixa rating plus energia and pressao.

    Caixa contributes up to 40, energia 35, pressao 25 (inverted: leve is best).
    """
    score = caixa / 10 * 40
    score += ENERGIA_WEIGHT[energia] * 100
    score += PRESSAO_WEIGHT[pressao] * 100
    return int(round(score))


def analyze_checkin_patterns(
    history: Sequence[Checkin],
    lookback_days: int = 30,
    cfg: BussolaConfig | None = None,
) -> CheckinPattern:
    s = (cfg or DEFAULT_CONFIG).suggestion
    recent = newest_first(history)[:lookback_days]

    if not recent:
        return CheckinPattern(
            most_common_caixa=CaixaStatus.ATENCAO,
            most_common_energia=Energia.MEDIA,
            most_common_pressao=Pressao.NORMAL,
        )

    by_weekday: Dict[int, List[Checkin]] = {}
    for c in recent:
        by_weekday.setdefault(c.date.weekday(), []).append(c)

    weekday_patterns = {
        weekday: WeekdayPattern(
            caixa_status=mode([c.caixa_status for c in group]),
            energia=mode([c.energia for c in group]),
            pressao=mode([c.pressao for c in group]),
        )
        for weekday, group in by_weekday.items()
        if len(group) >= s.min_weekday_samples
    }

    w = s.trend_window
    last_score = _wellbeing(recent[:w])
    prev_score = _wellbeing(recent[w: 2 * w])
    if last_score > prev_score + s.trend_band:
        trend = "improving"
    elif last_score < prev_score - s.trend_band:
        trend = "declining"
    else:
        trend = "stable"

    return CheckinPattern(
        most_common_caixa=mode([c.caixa_status for c in recent]),
        most_common_energia=mode([c.energia for c in recent]),
        most_common_pressao=mode([c.pressao for c in recent]),
        weekday_patterns=weekday_patterns,
        recent_trend=trend,
    )


def _step_back(current: T, scale: Sequence[T]) -> T:
    index = list(scale).index(current)
    return scale[index - 1] if index > 0 else current


def _step_forward(current: T, scale: Sequence[T]) -> T:
    index = list(scale).index(current)
    return scale[index + 1] if index < len(scale) - 1 else current


def suggest_checkin(
    history: Sequence[Checkin],
    target_date: date | None = None,
    cfg: BussolaConfig | None = None,
) -> CheckinSuggestion:
    """
    Suggest today's check-in values.

    Order of preference: the weekday's own pattern (with at least a week of
    history), then the overall modes with confidence scaled by history length.
    """
    cfg = cfg or DEFAULT_CONFIG
    s = cfg.suggestion

    if not history:
        return CheckinSuggestion(
            caixa=CaixaStatus.ATENCAO,
            energia=Energia.MEDIA,
            pressao=Pressao.NORMAL,
            confidence=s.confidence_none,
            reasoning="Valores padrão (sem histórico)",
        )

    target_date = target_date or date.today()
    patterns = analyze_checkin_patterns(history, s.lookback_days, cfg)
    weekday = target_date.weekday()
    weekday_pattern = patterns.weekday_patterns.get(weekday)

    if weekday_pattern is not None and len(history) >= s.min_history_for_weekday:
        return CheckinSuggestion(
            caixa=weekday_pattern.caixa_status,
            energia=weekday_pattern.energia,
            pressao=weekday_pattern.pressao,
            confidence=s.confidence_weekday,
            reasoning=f"Baseado em {WEEKDAY_NAMES_PT[weekday]}s anteriores",
        )

    if len(history) < s.min_history_for_weekday:
        confidence, reasoning = s.confidence_sparse, "Baseado em poucos dados"
    elif len(history) >= s.consistent_history:
        confidence, reasoning = s.confidence_consistent, "Baseado em padrão consistente"
    else:
        confidence, reasoning = s.confidence_default, "Baseado nos últimos 30 dias"

    energia = patterns.most_common_energia
    # Both branches walk one step toward ALTA.
    if patterns.recent_trend == "declining":
        energia = _step_back(energia, (Energia.ALTA, Energia.MEDIA, Energia.BAIXA))
        reasoning += " (tendência de queda)"
    elif patterns.recent_trend == "improving":
        energia = _step_forward(energia, (Energia.BAIXA, Energia.MEDIA, Energia.ALTA))
        reasoning += " (tendência de melhora)"

    return CheckinSuggestion(
        caixa=patterns.most_common_caixa,
        energia=energia,
        pressao=patterns.most_common_pressao,
        confidence=confidence,
        reasoning=reasoning,
    )
