import sys
import os
import json

current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_dir, "..", ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from src.server.upload import handle_upload
from src.utils.config import get_api_key, save_api_key, is_env_key_set, load_server_settings, get_log_level
from src.utils.logger import set_global_log_level

load_dotenv()
set_global_log_level(get_log_level())

st.set_page_config(page_title="Visor Fullereno", layout="wide")
st.title("Visor Fullereno")


def frames_table(record: dict) -> pd.DataFrame:
    rows = []
    for i, geometry in enumerate(record.get("geometries", [])):
        rows.append({
            "frame": i,
            "atoms": len(geometry),
            "first": geometry[0]["element"] if geometry else "",
            "last": geometry[-1]["element"] if geometry else "",
        })
    return pd.DataFrame(rows, columns=["frame", "atoms", "first", "last"])


# --- Upload service key ---
# The page parses locally and skips the key check; the key configured here is
# the one remote upload clients must send.
st.sidebar.header("Settings")

saved_key, key_source = get_api_key()
env_key_active = is_env_key_set()

if key_source == "env":
    st.sidebar.success("🌍 API Key loaded from environment variable")
elif key_source == "config":
    st.sidebar.info("📁 API Key loaded from config file")
else:
    st.sidebar.caption("✏️ No upload API Key configured; remote uploads are refused")

if env_key_active:
    st.sidebar.warning("⚠️ Environment variable is active. Saving to config will NOT override it.")

api_key_input = st.sidebar.text_input(
    "Upload service API Key",
    value=saved_key or "",
    type="password",
    key="visor_api_key"
)

save_key_checkbox = st.sidebar.checkbox(
    "Save API Key for future sessions",
    disabled=env_key_active,
    help="Saves to ~/.visor_fullereno/config.json" if not env_key_active else "Cannot save while environment variable is active"
)

if api_key_input and save_key_checkbox and api_key_input != saved_key:
    if save_api_key(api_key_input):
        st.sidebar.success("✅ API Key saved!")


st.sidebar.header("Inputs")
log_file = st.sidebar.file_uploader("ORCA output file", type=["out", "log", "txt"])
run_button = st.sidebar.button("Parse")

if run_button:
    if not log_file:
        st.sidebar.error("Please upload an ORCA output file.")
    else:
        settings = load_server_settings()
        response = handle_upload(log_file.getvalue(), None, settings, filename=log_file.name, check_key=False)

        if not response.success:
            st.error(f"[{response.status}] {response.body.get('msg')}")
        else:
            record = response.body
            col1, col2, col3, col4 = st.columns(4)
            energy = record.get("energy")
            col1.metric("Final energy (Eh)", f"{energy:.8f}" if energy is not None else "n/a")
            col2.metric("Frames", len(record.get("geometries", [])))
            col3.metric("Site index", record.get("siteIndex") if record.get("siteIndex") is not None else "n/a")
            col4.metric("Adsorbate", record.get("adsorbateKind") or "none")

            if record.get("efield"):
                ef = record["efield"]
                st.caption(f"External field: ({ef['ex']}, {ef['ey']}, {ef['ez']}) |E| = {ef['mag']:.6g}")
            if record.get("normal0"):
                n = record["normal0"]
                st.caption(f"Surface normal at site: ({n['x']:.4f}, {n['y']:.4f}, {n['z']:.4f})")

            st.subheader("Trajectory")
            st.dataframe(frames_table(record), use_container_width=True)

            st.subheader("Record")
            st.download_button(
                "Download JSON",
                data=json.dumps(record, indent=2),
                file_name=f"{os.path.splitext(log_file.name)[0]}.json",
                mime="application/json",
            )
            st.json(record, expanded=False)

st.sidebar.markdown("---")
