import streamlit as st
import requests
import pandas as pd
from datetime import date, timedelta
from app.streamlit_pages.components.auth import API_BASE_URL, auth
from app.streamlit_pages.components.navigation import render_navigation

st.set_page_config(
    page_title="Reservations",
    page_icon="📅",
    layout="wide"
)

STATUSES = ["pending", "confirmed", "cancelled", "completed"]
PLATFORMS = ["direct", "airbnb", "booking", "expedia", "other"]


def get_properties():
    try:
        response = requests.get(f"{API_BASE_URL}/properties/",
                                headers=auth.get_headers(), timeout=10)
        if response.status_code == 200:
            return response.json()
    except requests.RequestException as e:
        st.error(f"Error loading properties: {e}")
    return []


def get_reservations(params):
    """Fetch one page of reservations"""
    try:
        response = requests.get(f"{API_BASE_URL}/reservations/",
                                headers=auth.get_headers(), params=params, timeout=10)
        if response.status_code == 200:
            return response.json()
    except requests.RequestException as e:
        st.error(f"Error loading reservations: {e}")
    return {"items": [], "pagination": {"total_count": 0}}


def check_availability(property_id, check_in, check_out):
    try:
        response = requests.get(
            f"{API_BASE_URL}/reservations/check-availability",
            headers=auth.get_headers(),
            params={
                "property_id": property_id,
                "check_in_date": check_in.isoformat(),
                "check_out_date": check_out.isoformat(),
            },
            timeout=10,
        )
        if response.status_code == 200:
            return response.json()
    except requests.RequestException:
        return None
    return None


def create_reservation(data):
    try:
        response = requests.post(f"{API_BASE_URL}/reservations/",
                                 json=data, headers=auth.get_headers(), timeout=10)
        if response.status_code == 200:
            return True, response.json()
        return False, response.json().get("detail")
    except requests.RequestException as e:
        return False, str(e)


def update_status(reservation_id, status):
    try:
        response = requests.put(f"{API_BASE_URL}/reservations/{reservation_id}",
                                json={"status": status}, headers=auth.get_headers(), timeout=10)
        return response.status_code == 200
    except requests.RequestException:
        return False


def main():
    st.title("📅 Reservations")

    if not auth.is_authenticated():
        auth.render_login_form()
        return

    auth.render_user_info()
    render_navigation("pages/03_Reservations.py")

    properties = get_properties()
    property_names = {prop["name"]: prop["id"] for prop in properties}
    property_by_id = {prop["id"]: prop["name"] for prop in properties}

    tab1, tab2 = st.tabs(["📋 Reservations", "➕ New Reservation"])

    with tab1:
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            property_filter = st.selectbox("Property", ["All"] + list(property_names))
        with col2:
            status_filter = st.selectbox("Status", ["All"] + STATUSES)
        with col3:
            start_date = st.date_input("Check-in from", value=date.today() - timedelta(days=30))
        with col4:
            end_date = st.date_input("Check-in to", value=date.today() + timedelta(days=60))
        search = st.text_input("Guest name")

        params = {
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "limit": 200,
        }
        if property_filter != "All":
            params["property_id"] = property_names[property_filter]
        if status_filter != "All":
            params["status"] = status_filter
        if search:
            params["search"] = search

        page = get_reservations(params)
        reservations = page["items"]
        st.caption(f"{page['pagination'].get('total_count', 0)} reservations")

        if reservations:
            df = pd.DataFrame([
                {
                    "ID": res["id"],
                    "Property": property_by_id.get(res["property_id"], res["property_id"]),
                    "Guest": res["guest_name"],
                    "Check-in": res["check_in_date"],
                    "Check-out": res["check_out_date"],
                    "Guests": res["num_guests"],
                    "Platform": res["platform"],
                    "Status": res["status"],
                    "Total (€)": float(res["total_amount"]),
                    "Net (€)": float(res["net_amount"]),
                }
                for res in reservations
            ])
            st.dataframe(df, use_container_width=True)

            if auth.can_write():
                st.markdown("---")
                options = {f"#{res['id']} {res['guest_name']} ({res['check_in_date']})": res
                           for res in reservations}
                selected = st.selectbox("Change status of:", [""] + list(options))
                if selected:
                    res = options[selected]
                    new_status = st.selectbox("New status", STATUSES,
                                              index=STATUSES.index(res["status"]))
                    if st.button("Update status", type="primary"):
                        if update_status(res["id"], new_status):
                            st.success("Reservation updated successfully!")
                            st.rerun()
                        else:
                            st.error("Failed to update reservation")
        else:
            st.info("No reservations found")

    with tab2:
        if not auth.can_write():
            st.info("Staff role required for creating reservations")
        elif not properties:
            st.warning("Create a property first")
        else:
            with st.form("new_reservation"):
                col1, col2 = st.columns(2)
                with col1:
                    property_name = st.selectbox("Property", list(property_names))
                    guest_name = st.text_input("Guest name")
                    guest_email = st.text_input("Guest email")
                    guest_phone = st.text_input("Guest phone")
                    num_guests = st.number_input("Guests", min_value=1, value=2)
                with col2:
                    check_in = st.date_input("Check-in", value=date.today())
                    check_out = st.date_input("Check-out", value=date.today() + timedelta(days=3))
                    total_amount = st.number_input("Total amount (€)", min_value=0.0, step=10.0)
                    platform_fee = st.number_input("Platform fee (€)", min_value=0.0, step=1.0)
                    platform = st.selectbox("Platform", PLATFORMS)
                    status = st.selectbox("Status", STATUSES[:2])
                notes = st.text_area("Notes")

                if st.form_submit_button("Create reservation", type="primary"):
                    property_id = property_names[property_name]
                    availability = check_availability(property_id, check_in, check_out)
                    if availability and not availability["is_available"]:
                        st.warning(
                            "Overlaps reservations "
                            f"{availability['conflicting_reservation_ids']}"
                        )
                    success, result = create_reservation({
                        "property_id": property_id,
                        "guest_name": guest_name,
                        "guest_email": guest_email or None,
                        "guest_phone": guest_phone or None,
                        "check_in_date": check_in.isoformat(),
                        "check_out_date": check_out.isoformat(),
                        "num_guests": num_guests,
                        "total_amount": total_amount,
                        "platform_fee": platform_fee,
                        "platform": platform,
                        "status": status,
                        "notes": notes or None,
                    })
                    if success:
                        st.success(f"Reservation created. Net amount: € {float(result['net_amount']):,.2f}")
                    else:
                        st.error(f"Failed to create reservation: {result}")


if __name__ == "__main__":
    main()
