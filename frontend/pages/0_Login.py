"""
0_Login.py: Login & Register page.
This is page 0 in the Streamlit sidebar so it always appears first.
"""
import streamlit as st

from components.session import get_client, run_call
from exam_client.services import auth

st.set_page_config(
    page_title="ACS Exams | Login",
    page_icon="📝",
    layout="centered",
)

client = get_client()

# ── Redirect if already logged in ────────────────────────────────────────────
if not client.session.is_token_expired():
    st.success("You are already logged in.")
    st.page_link("Home.py", label="Go to Dashboard →")
    st.stop()

st.title("📝 ACS Exams")
tab_login, tab_register = st.tabs(["Sign In", "Create Account"])

# ── LOGIN ────────────────────────────────────────────────────────────────────
with tab_login:
    with st.form("login_form"):
        phone = st.text_input("Phone", placeholder="+213XXXXXXXXX")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In")

    if submitted:
        if not phone or not password:
            st.error("Please fill in both fields.")
        else:
            user = run_call(auth.login, client, phone, password)
            if user:
                st.success(f"Welcome back, {user.get('fullName') or user.get('phone')}!")
                st.switch_page("Home.py")

# ── REGISTER ─────────────────────────────────────────────────────────────────
with tab_register:
    with st.form("register_form"):
        r_name = st.text_input("Full name", key="r_name")
        r_phone = st.text_input("Phone", placeholder="+213XXXXXXXXX", key="r_phone")
        r_email = st.text_input("Email (optional)", key="r_email")
        r_birth = st.date_input("Date of birth", value=None, key="r_birth")
        r_password = st.text_input("Password (min 6 chars)", type="password", key="r_pass")
        r_confirm = st.text_input("Confirm Password", type="password", key="r_confirm")
        r_submitted = st.form_submit_button("Create Account")

    if r_submitted:
        if r_password != r_confirm:
            st.error("Passwords do not match.")
        else:
            user = run_call(
                auth.register,
                client,
                full_name=r_name.strip(),
                phone=r_phone.strip(),
                password=r_password,
                date_of_birth=r_birth.isoformat() if r_birth else "",
                email=r_email.strip() or None,
            )
            if user:
                st.success("Account created! Redirecting…")
                st.switch_page("Home.py")
