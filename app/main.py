import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st
import pandas as pd
import plotly.graph_objects as go
import plotly.express as px

from finpulse.config import COLORS, load_settings
from finpulse.domain import ChartType, TimeWindow
from finpulse.formatting import format_currency, format_percentage, format_progress_line
from finpulse.logging_setup import configure_logging, get_logger
from finpulse.services import DashboardService, PersonalizationService
from finpulse.store import PersonalizationStore
from finpulse.transforms import category_options, load_transactions
from finpulse import wizard

settings = load_settings()
configure_logging(settings.log_level)
logger = get_logger("finpulse.app")

st.set_page_config(page_title="Finance Dashboard", layout="wide")


@st.cache_data
def _load(path: str):
    records = load_transactions(path)
    logger.info("Loaded %d transactions from %s", len(records), path)
    return records


transactions = _load(str(settings.transactions_file))
dashboard = DashboardService(transactions)

if "personalization" not in st.session_state:
    svc = PersonalizationService(PersonalizationStore.from_directory(settings.data_dir))
    svc.load()
    st.session_state.personalization = svc
if "wizard" not in st.session_state:
    st.session_state.wizard = wizard.WizardState()
if "wizard_error" not in st.session_state:
    st.session_state.wizard_error = None

svc: PersonalizationService = st.session_state.personalization

menu = st.sidebar.radio("Menu", ["📈 Overview", "🎯 Goals & Alerts"])
hide_values = st.sidebar.toggle("Hide values", value=False)


def money(v: float) -> str:
    return "•••••" if hide_values else format_currency(v)


def daily_df(series) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"date": d.date, "Income": d.income, "Expense": d.expense} for d in series],
        columns=["date", "Income", "Expense"],
    )
    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d")
    return df


def render_chart(chart_type: ChartType, result: dict) -> go.Figure:
    colors = {"Income": COLORS["income"], "Expense": COLORS["expense"]}

    if chart_type in (ChartType.AREA, ChartType.BAR):
        df = daily_df(result["daily"]).melt(id_vars="date", var_name="type", value_name="amount")
        if chart_type is ChartType.AREA:
            fig = px.area(df, x="date", y="amount", color="type", color_discrete_map=colors)
        else:
            fig = px.bar(df, x="date", y="amount", color="type", barmode="group", color_discrete_map=colors)
        fig.update_xaxes(tickformat="%d %b")

    elif chart_type is ChartType.PIE:
        df = pd.DataFrame([{"name": t.name, "value": t.value} for t in result["category_totals"]])
        fig = px.pie(df, values="value", names="name", hole=0.5, color="name", color_discrete_map=colors)

    elif chart_type is ChartType.RADAR:
        weekdays = result["weekdays"]
        labels = [w.weekday for w in weekdays]
        fig = go.Figure()
        for name, attr in (("Income", "income"), ("Expense", "expense")):
            values = [getattr(w, attr) for w in weekdays]
            fig.add_trace(go.Scatterpolar(
                r=values + values[:1], theta=labels + labels[:1], fill="toself",
                name=name, line_color=colors[name],
            ))

    else:  # radial
        totals = result["category_totals"]
        fig = go.Figure(go.Barpolar(
            r=[t.value for t in totals],
            theta=[t.name for t in totals],
            marker_color=[colors[t.name] for t in totals],
        ))

    fig.update_layout(template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10), height=320)
    return fig


def goal_cards():
    if not svc.goals:
        return
    st.subheader("🎯 Savings goals")
    for goal in svc.goals:
        progress = svc.goal_progress(goal)
        st.write(format_progress_line(goal.name, goal.current_amount, goal.target_amount, money))
        st.progress(progress / 100, text=format_percentage(progress))


def alert_cards():
    if not svc.alerts:
        return
    st.subheader("⚠️ Spending alerts")
    # alerts are checked against every transaction, not the chart window
    for status in svc.alert_statuses(transactions):
        line = format_progress_line(status.alert.category, status.spent, status.alert.limit_amount, money)
        if status.over_limit:
            st.error(line)
            st.caption(f"You exceeded the limit by {money(status.excess)}!")
        else:
            st.write(line)
        st.progress(status.percentage / 100)


def settings_wizard():
    state: wizard.WizardState = st.session_state.wizard

    def _set(new_state):
        st.session_state.wizard = new_state
        st.rerun()

    if not state.is_open:
        if st.button("⚙️ Customize widgets", key="btn_open_wizard"):
            st.session_state.wizard_error = None
            _set(wizard.open_settings(state))
        return

    st.subheader("⚙️ Customize dashboard")

    if state.step is wizard.WizardStep.SELECTING_KIND:
        st.caption("Choose which widget to add to your dashboard.")
        c1, c2, c3 = st.columns(3)
        if c1.button("🎯 Savings goal", key="btn_pick_goal"):
            _set(wizard.pick_kind(state, wizard.WidgetKind.GOAL))
        if c2.button("⚠️ Spending alert", key="btn_pick_alert"):
            _set(wizard.pick_kind(state, wizard.WidgetKind.ALERT))
        if c3.button("Cancel", key="btn_cancel_wizard"):
            _set(wizard.close(state))
        return

    if state.step is wizard.WizardStep.EDITING_GOAL:
        st.caption("Define a new savings goal.")
        name = st.text_input("Goal name", value=state.goal.name, placeholder="Trip, new car")
        col1, col2 = st.columns(2)
        target = col1.text_input("Target amount (R$)", value=state.goal.target, placeholder="0,00")
        current = col2.text_input("Current amount (R$)", value=state.goal.current, placeholder="0,00")
        state = wizard.edit_goal_draft(state, name=name, target=target, current=current)
        submit_label = "Create goal"
    else:
        st.caption("Create a spending alert for a category.")
        options = list(category_options(transactions))
        idx = options.index(state.alert.category) if state.alert.category in options else None
        category = st.selectbox("Category", options, index=idx, placeholder="Select a category")
        limit = st.text_input("Monthly limit (R$)", value=state.alert.limit, placeholder="0,00")
        state = wizard.edit_alert_draft(state, category=category or "", limit=limit)
        submit_label = "Create alert"
    st.session_state.wizard = state

    if st.session_state.wizard_error:
        st.warning(st.session_state.wizard_error)

    back_col, submit_col = st.columns(2)
    if back_col.button("Back", key="btn_wizard_back"):
        _set(wizard.go_back(state))
    if submit_col.button(submit_label, key="btn_wizard_submit", type="primary"):
        new_state, result = wizard.submit(state, svc)
        st.session_state.wizard_error = None if result.is_right() else result.get_error()["message"]
        _set(new_state)


if menu == "📈 Overview":
    st.title("📈 Overview")

    col_type, col_window = st.columns(2)
    with col_type:
        chart_type = ChartType(st.selectbox(
            "Chart type", [c.value for c in ChartType], format_func=str.capitalize
        ))
    with col_window:
        windows = list(TimeWindow)
        default = TimeWindow.from_key(settings.default_window)
        window = st.radio(
            "Period", windows, index=windows.index(default),
            format_func=lambda w: w.label, horizontal=True,
        )

    report = dashboard.chart_report(window)
    result = report["result"]

    income, expense = result["category_totals"]
    k1, k2, k3 = st.columns(3)
    k1.metric("Income", money(income.value))
    k2.metric("Expense", money(expense.value))
    k3.metric("Days with activity", len(result["daily"]))

    if not result["daily"]:
        st.info("No data available for the selected period")
    else:
        st.plotly_chart(render_chart(chart_type, result), use_container_width=True)

    with st.expander("Pipeline steps", expanded=False):
        for s in report["steps"]:
            st.write(s["step"], s["output"])

    st.divider()
    left, right = st.columns(2)
    with left:
        goal_cards()
    with right:
        alert_cards()

elif menu == "🎯 Goals & Alerts":
    st.title("🎯 Goals & Alerts")

    goal_cards()

    if svc.alerts:
        st.subheader("Alert switches")
        for alert in svc.alerts:
            enabled = st.toggle(
                f"{alert.category} ({money(alert.limit_amount)})",
                value=alert.enabled,
                key=f"alert_{alert.id}",
            )
            if enabled != alert.enabled:
                svc.set_alert_enabled(alert.id, enabled)
                st.rerun()

    st.divider()
    alert_cards()
    st.divider()
    settings_wizard()
