import streamlit as st
import requests
import pandas as pd
from app.streamlit_pages.components.auth import API_BASE_URL, auth
from app.streamlit_pages.components.navigation import render_navigation

st.set_page_config(
    page_title="OCR Import",
    page_icon="📄",
    layout="wide"
)

EDITABLE_COLUMNS = [
    "property_name", "nome", "data_entrada", "data_saida", "hospedes",
    "site", "telefone", "total_amount", "observacoes",
]


def get_status():
    try:
        response = requests.get(f"{API_BASE_URL}/simple-ocr/status",
                                headers=auth.get_headers(), timeout=10)
        if response.status_code == 200:
            return response.json()
    except requests.RequestException:
        return None
    return None


def process_files(uploaded_files):
    """Send the uploads to the OCR endpoint"""
    files = [
        ("files", (f.name, f.getvalue(), f.type)) for f in uploaded_files
    ]
    try:
        response = requests.post(f"{API_BASE_URL}/simple-ocr/process-multiple",
                                 files=files, headers=auth.get_headers(), timeout=300)
        if response.status_code == 200:
            return True, response.json()
        return False, response.json().get("detail")
    except requests.RequestException as e:
        return False, str(e)


def save_reservations(rows):
    payload = {
        "reservations": [
            {
                "property_name": row["property_name"] or None,
                "property_id": row.get("property_id"),
                "guest_name": row["nome"],
                "guest_phone": row["telefone"] or None,
                "check_in_date": row["data_entrada"],
                "check_out_date": row["data_saida"],
                "num_guests": int(row["hospedes"] or 1),
                "total_amount": float(row["total_amount"] or 0),
                "platform": row["site"],
                "notes": row["observacoes"] or None,
            }
            for row in rows
        ]
    }
    try:
        response = requests.post(f"{API_BASE_URL}/simple-ocr/save-reservations",
                                 json=payload, headers=auth.get_headers(), timeout=60)
        if response.status_code == 200:
            return True, response.json()
        return False, response.json().get("detail")
    except requests.RequestException as e:
        return False, str(e)


def main():
    st.title("📄 OCR Import")

    if not auth.is_authenticated():
        auth.render_login_form()
        return

    auth.render_user_info()
    render_navigation("pages/05_OCR_Import.py")

    status = get_status()
    if status:
        if status["status"] == "operational":
            st.success(f"Providers: {', '.join(status['configured_providers'])}")
        else:
            st.warning("No AI provider is configured; only PDFs can be read")

    if not auth.can_write():
        st.info("Staff role required for importing reservations")
        return

    uploaded_files = st.file_uploader(
        "Check-in / check-out sheets or control files",
        type=["pdf", "png", "jpg", "jpeg", "webp"],
        accept_multiple_files=True,
    )

    if uploaded_files and st.button("Extract reservations", type="primary"):
        with st.spinner("Reading documents..."):
            success, result = process_files(uploaded_files)
        if success:
            st.session_state["ocr_result"] = result
        else:
            st.error(f"Processing failed: {result}")

    result = st.session_state.get("ocr_result")
    if not result:
        return

    st.subheader("Files")
    st.dataframe(pd.DataFrame(result["file_results"]), use_container_width=True)

    if not result["reservations"]:
        st.info("No reservations were extracted")
        return

    st.subheader("Review")
    df = pd.DataFrame(result["reservations"])
    edited = st.data_editor(
        df[EDITABLE_COLUMNS + ["property_id", "needs_review", "source_file"]],
        disabled=["property_id", "needs_review", "source_file"],
        use_container_width=True,
        num_rows="dynamic",
    )

    if st.button("Save reservations", type="primary"):
        rows = edited.where(pd.notnull(edited), None).to_dict("records")
        success, saved = save_reservations(rows)
        if success:
            st.success(f"Saved {saved['saved_count']} of {saved['total_reservations']}")
            for error in saved["errors"]:
                st.warning(error)
            if saved["saved_count"]:
                del st.session_state["ocr_result"]
        else:
            st.error(f"Save failed: {saved}")


if __name__ == "__main__":
    main()
