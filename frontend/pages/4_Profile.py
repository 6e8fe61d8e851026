"""4_Profile.py: profile details and password change."""
import streamlit as st

from components.session import require_auth, run_call
from exam_client.services import user as user_service

st.set_page_config(page_title="Profile", page_icon="👤", layout="centered")

client = require_auth()

st.title("👤 Profile")

me = run_call(user_service.get_profile, client)
if me is None:
    st.stop()

with st.form("profile_form"):
    full_name = st.text_input("Full name", value=me.full_name or "")
    email = st.text_input("Email", value=me.email or "")
    birth = st.text_input("Date of birth (YYYY-MM-DD)", value=me.date_of_birth or "")
    save = st.form_submit_button("Save")

if save:
    updated = run_call(
        user_service.update_profile,
        client,
        full_name=full_name or None,
        email=email or None,
        date_of_birth=birth or None,
    )
    if updated:
        st.success("Profile updated.")

st.divider()

with st.form("password_form"):
    current = st.text_input("Current password", type="password")
    new = st.text_input("New password", type="password")
    change = st.form_submit_button("Change password")

if change and run_call(user_service.change_password, client, current, new):
    st.success("Password changed.")
