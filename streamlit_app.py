from typing import Dict, Any
import streamlit as st
from skirmish import (
    Battlefield, SkirmishEngine, Faction, PowerTuner, TuningConfig,
    SAMPLE_BATTLES, DEFAULT_BATTLE, DEFAULT_ATTACK_POWER, SkirmishError,
    next_step, shortest_path, choose_destination,
)
from skirmish.batch import trial_table
from skirmish.enums import MARKER_GLYPH

st.set_page_config(page_title="Skirmish: Grid Combat", layout="wide")

# --- Initialize session state ---
if "map_text" not in st.session_state:
    st.session_state.map_text = SAMPLE_BATTLES[DEFAULT_BATTLE].map_text

if "last_outcome" not in st.session_state:
    st.session_state.last_outcome = None

if "last_tuning" not in st.session_state:
    st.session_state.last_tuning = None

st.title("Skirmish: Grid Combat")
st.markdown(
    "Elves (`E`) and goblins (`G`) fight on a walled grid (`#` wall, `.` floor). "
    "Run one battle with the chosen attack powers, or search for the smallest elf "
    "attack power that wins without losing a single elf."
)

menu = st.sidebar.radio("Menu", ("Battle", "Tune", "Plan"), key="menu")

with st.sidebar.expander("Map", expanded=True):
    preset = st.selectbox("Sample map", options=["(custom)"] + list(SAMPLE_BATTLES.keys()), key="preset")
    if preset != "(custom)" and st.button("Load sample", key="load_sample"):
        st.session_state.map_text = SAMPLE_BATTLES[preset].map_text
    uploaded = st.file_uploader("Upload map (.txt)", type=["txt"], key="map_upload")
    if uploaded and st.button("Use uploaded map", key="use_upload"):
        st.session_state.map_text = uploaded.getvalue().decode("utf-8")
    map_text = st.text_area("Map text", key="map_text", height=220)


def _parse(text: str, powers: Dict[Faction, int]):
    try:
        return Battlefield.from_text(text, attack_power=powers)
    except (SkirmishError, ValueError) as e:
        st.error(getattr(e, "user_message", str(e)))
        return None


# --- Battle panel ---
if menu == "Battle":
    st.header("Single battle")
    col1, col2 = st.columns([1, 1])
    with col1:
        elf_power = st.number_input("Elf attack power", min_value=1, max_value=999,
                                    value=DEFAULT_ATTACK_POWER, key="elf_power")
    with col2:
        goblin_power = st.number_input("Goblin attack power", min_value=1, max_value=999,
                                       value=DEFAULT_ATTACK_POWER, key="goblin_power")

    if st.button("Run battle", key="run_battle"):
        battlefield = _parse(map_text, {Faction.ELF: int(elf_power), Faction.GOBLIN: int(goblin_power)})
        if battlefield is not None:
            engine = SkirmishEngine(battlefield)
            try:
                outcome = engine.run()
            except SkirmishError as e:
                st.error(e.user_message)
            else:
                st.session_state.last_outcome = outcome.to_dict()
                st.session_state.last_render = battlefield.render(annotate=True)
                st.session_state.last_log = engine.combat_log

    result: Dict[str, Any] = st.session_state.last_outcome
    if result:
        m1, m2, m3 = st.columns(3)
        winner = Faction[result["winner"].upper()].plural.title() if result["winner"] else "-"
        m1.metric("Winner", winner)
        m2.metric("Full rounds", result["rounds"])
        m3.metric("Outcome", result["score"])
        st.code(st.session_state.last_render, language=None)
        st.json(result)
        with st.expander("Combat log"):
            st.text("\n".join(st.session_state.last_log))

# --- Tuning panel ---
elif menu == "Tune":
    st.header("Attack power tuning")
    col1, col2 = st.columns([1, 1])
    with col1:
        faction_name = st.selectbox("Tuned faction", options=[f.name.title() for f in Faction], key="tune_faction")
        strategy = st.selectbox("Search", options=["linear", "binary"], key="tune_strategy")
    with col2:
        start_power = st.number_input("Start power", min_value=1, value=DEFAULT_ATTACK_POWER + 1, key="start_power")
        max_power = st.number_input("Max power", min_value=1, value=200, key="max_power")

    if st.button("Find minimal power", key="run_tuning"):
        config = TuningConfig(
            map_text=map_text,
            faction=Faction[faction_name.upper()],
            start_power=int(start_power),
            max_power=int(max_power),
            strategy=strategy,
        )
        bar = st.progress(0.0)
        try:
            tuning = PowerTuner.run(config, progress_callback=lambda i, n: bar.progress(min(1.0, i / n)))
        except (SkirmishError, ValueError) as e:
            st.error(getattr(e, "user_message", str(e)))
        else:
            bar.progress(1.0)
            st.session_state.last_tuning = {
                "attack_power": tuning.attack_power,
                "score": tuning.score,
                "rows": trial_table(tuning),
            }

    tuned = st.session_state.last_tuning
    if tuned:
        c1, c2 = st.columns(2)
        c1.metric("Minimal attack power", tuned["attack_power"])
        c2.metric("Outcome", tuned["score"])
        st.table(tuned["rows"])

# --- Movement planning panel ---
elif menu == "Plan":
    st.header("Movement plan")
    st.write("Pick a combatant to see where it would head and the path it would take.")
    battlefield = _parse(map_text, {})
    if battlefield is not None:
        units = battlefield.combatant_positions()
        labels = [f"{battlefield.combatant_at(p).name} @ {p.x},{p.y}" for p in units]
        choice = st.selectbox("Combatant", options=range(len(units)), format_func=lambda i: labels[i], key="plan_unit")
        origin = units[choice]
        destination = choose_destination(battlefield, origin)
        if destination is None:
            st.info("No reachable cell next to an enemy: this unit holds position.")
            st.code(battlefield.render(), language=None)
        else:
            path = shortest_path(battlefield, origin, destination) or []
            step = next_step(battlefield, origin)
            st.write(f"Destination: {destination.x},{destination.y} - first step: "
                     f"{step.x},{step.y}" if step else f"Destination: {destination.x},{destination.y}")
            st.code(battlefield.render(markers={p: MARKER_GLYPH for p in path}), language=None)

st.sidebar.markdown("---")
st.sidebar.write("Skirmish · Streamlit UI")
