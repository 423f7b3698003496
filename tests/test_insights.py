from bussola.entities import EstadoCalculado
from bussola.insights import compute_enhanced_finance_summary, compute_operational_insights

from tests.factories import NOW, TODAY, checkin, expense, income, project


def test_enhanced_summary_even_spending():
    entries = [income(100_000, 0)] + [expense(1_000, d) for d in range(30)]
    s = compute_enhanced_finance_summary(entries, 30, TODAY)
    assert (s.total_entradas, s.total_saidas, s.balance) == (100_000, 30_000, 70_000)
    assert s.avg_daily_spending == 1_000
    assert s.forecast_days == 70
    assert s.health_score == 100
    assert s.spending_trend == "stable"
    assert s.anomaly_detected is False
    assert (s.forecast_30d, s.forecast_60d, s.forecast_90d) == (30_000, 60_000, 90_000)
    assert s.recommended_action == "Continue monitorando gastos"


def test_enhanced_summary_spike():
    s = compute_enhanced_finance_summary([income(100_000, 5), expense(50_000, 2)], 30, TODAY)
    assert s.forecast_days == 30
    assert s.health_score == 100
    assert s.spending_trend == "increasing"
    assert s.anomaly_detected is True
    # ema 7031.25 per day, rounded once per horizon
    assert (s.forecast_30d, s.forecast_60d, s.forecast_90d) == (210_938, 421_875, 632_812)
    assert s.recommended_action == "Investigar gastos incomuns detectados"


def test_caution_day_composite_health():
    today = checkin(0, "atencao", "media", "normal")
    history = [today, checkin(1, energia="alta"), checkin(2, energia="baixa")]
    entries = [income(100_000, 5), expense(50_000, 2)]
    ins = compute_operational_insights(today, history, entries, [], {}, TODAY, NOW)

    assert ins.current_state is EstadoCalculado.CAUTION
    # 100*0.5 + 60*0.3 + 60*0.2
    assert ins.health_score == 80
    assert ins.energy_pattern.current_streak == 2
    assert ins.energy_pattern.best_day == "Tuesday"
    assert ins.energy_pattern.worst_day == "Monday"
    assert ins.warnings == ["Gastos em tendência de alta", "Anomalia detectada nos gastos"]
    assert ins.recommended_actions == ["Revisar despesas dos últimos 7 dias"]
    assert ins.top_priority_project is None


def test_attack_day_with_stalled_project():
    today = checkin(0, "tranquilo", "alta", "leve")
    projects = [project("Site"), project("Velho", days_since_update=10), project("Pausado", status="paused")]
    ins = compute_operational_insights(today, [today], [], projects, today=TODAY, now=NOW)

    # finance 80 (zero balance tier) -> 80*0.5 + 100*0.3 + 100*0.2
    assert ins.finance.health_score == 80
    assert ins.health_score == 90
    assert ins.top_priority_project == "Site"
    assert ins.warnings == ["1 projeto(s) parado(s)"]
    assert ins.recommended_actions == [
        "Definir próximas ações para projetos travados",
        "Avançar projeto: Site",
    ]
    assert ins.productivity_correlation == 0.0


def test_critical_day():
    today = checkin(0, "critico", "baixa", "alta")
    entries = [income(1_000, 1), expense(50_000, 1)]
    ins = compute_operational_insights(today, [today], entries, [], today=TODAY, now=NOW)

    assert ins.finance.health_score == 0
    # 0*0.5 + 20*0.3 + 20*0.2
    assert ins.health_score == 10
    assert ins.warnings[0] == "Saúde operacional crítica"
    assert ins.recommended_actions[0].startswith("Urgente")
