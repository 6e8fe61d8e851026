"""1_Admin_Login.py: sign-in for administrators."""
import streamlit as st

from components.session import get_client, run_call
from exam_client.services import auth

st.set_page_config(page_title="ACS Exams | Admin", page_icon="🛡️", layout="centered")

client = get_client()

if not client.session.is_token_expired() and client.session.is_admin():
    st.success("You are already logged in as an administrator.")
    st.page_link("pages/5_Admin.py", label="Go to Admin Dashboard →")
    st.stop()

st.title("🛡️ Administration")

with st.form("admin_login_form"):
    username = st.text_input("Username")
    password = st.text_input("Password", type="password")
    submitted = st.form_submit_button("Sign In")

if submitted:
    admin = run_call(auth.admin_login, client, username, password)
    if admin:
        st.switch_page("pages/5_Admin.py")
