import streamlit as st

PAGES = [
    ("🏠 Dashboard", "01_Dashboard.py"),
    ("🏡 Properties", "pages/02_Properties.py"),
    ("📅 Reservations", "pages/03_Reservations.py"),
    ("🧾 Quotations", "pages/04_Quotations.py"),
    ("📄 OCR Import", "pages/05_OCR_Import.py"),
]


def render_navigation(current: str):
    """Sidebar buttons for every page, highlighting the current one"""
    st.sidebar.title("Navigation")
    for label, page in PAGES:
        button_type = "primary" if page == current else "secondary"
        if st.sidebar.button(label, type=button_type):
            st.switch_page(page)
