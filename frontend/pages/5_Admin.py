"""5_Admin.py: statistics, users, sections and exams for administrators."""
import streamlit as st

from components.session import require_auth, run_call
from exam_client.services import admin, auth

st.set_page_config(page_title="Admin", page_icon="🛡️", layout="wide")

client = require_auth(admin=True)

with st.sidebar:
    st.markdown(f"Signed in as **{(client.session.admin or {}).get('username', 'admin')}**")
    if st.button("Sign Out", key="admin-logout"):
        auth.logout(client)
        st.rerun()

st.title("🛡️ Admin Dashboard")
tab_stats, tab_users, tab_sections, tab_exams = st.tabs(["Stats", "Users", "Sections", "Exams"])

# ── Stats ────────────────────────────────────────────────────────────────────
with tab_stats:
    stats = run_call(admin.get_stats, client)
    if stats:
        c1, c2, c3 = st.columns(3)
        c1.metric("Users", stats.users_count)
        c2.metric("Exams", stats.exams_count)
        c3.metric("Results", stats.results_count)
        if stats.top_exams:
            st.subheader("Top exams")
            st.table([{"Exam": e.title, "Attempts": e.attempts} for e in stats.top_exams])

# ── Users ────────────────────────────────────────────────────────────────────
with tab_users:
    search = st.text_input("Search by name or phone")
    page = st.number_input("Page", min_value=1, value=1, step=1)
    listed = run_call(admin.list_users, client, page=int(page), limit=20, search=search)
    if listed:
        users, pagination = listed
        for u in users:
            cols = st.columns([4, 3, 1])
            cols[0].write(u.full_name or u.id)
            cols[1].write(u.phone or "")
            if cols[2].button("Delete", key=f"del_user_{u.id}"):
                run_call(admin.delete_user, client, u.id)
                st.rerun()
        if pagination:
            st.caption(f"Page {pagination.get('page', page)} of {pagination.get('totalPages', '?')}")

# ── Sections ─────────────────────────────────────────────────────────────────
with tab_sections:
    with st.form("new_section"):
        name = st.text_input("Name")
        description = st.text_input("Description")
        if st.form_submit_button("Add section") and name:
            if run_call(admin.create_section, client, name, description or None):
                st.rerun()

    for s in run_call(admin.list_sections, client) or []:
        cols = st.columns([4, 2, 1])
        cols[0].write(s.name)
        active = cols[1].toggle("Active", value=s.is_active, key=f"active_{s.id}")
        if active != s.is_active:
            run_call(admin.update_section, client, s.id, is_active=active)
        if cols[2].button("Delete", key=f"del_section_{s.id}"):
            run_call(admin.delete_section, client, s.id)
            st.rerun()

# ── Exams ────────────────────────────────────────────────────────────────────
with tab_exams:
    listed = run_call(admin.list_exams, client, limit=50)
    if listed:
        exam_list, _ = listed
        for e in exam_list:
            cols = st.columns([5, 1, 1])
            cols[0].write(e.title)
            published = cols[1].toggle("Public", value=e.is_public, key=f"public_{e.id}")
            if published != e.is_public:
                run_call(admin.update_exam, client, e.id, {"isPublic": published})
            if cols[2].button("Delete", key=f"del_exam_{e.id}"):
                run_call(admin.delete_exam, client, e.id)
                st.rerun()

    with st.expander("New exam"):
        with st.form("new_exam"):
            title = st.text_input("Title")
            section_id = st.text_input("Section id")
            duration = st.number_input("Duration (minutes)", min_value=1, value=30)
            difficulty = st.selectbox("Difficulty", [1, 2, 3, 4, 5])
            is_public = st.checkbox("Public")
            if st.form_submit_button("Create") and title:
                created = run_call(
                    admin.create_exam,
                    client,
                    {
                        "title": title,
                        "sectionId": section_id,
                        "duration": int(duration),
                        "difficulty": str(difficulty),
                        "isPublic": is_public,
                        "questions": [],
                    },
                )
                if created:
                    st.success(f"Created {created.title}")
