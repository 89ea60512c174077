import streamlit as st
import requests
import pandas as pd
from datetime import date
from app.streamlit_pages.components.auth import API_BASE_URL, auth
from app.streamlit_pages.components.navigation import render_navigation

st.set_page_config(
    page_title="Maria Faz Dashboard",
    page_icon="🏠",
    layout="wide"
)


def get_dashboard_stats(start_date, end_date):
    """Fetch dashboard statistics for a period"""
    try:
        response = requests.get(
            f"{API_BASE_URL}/statistics",
            headers=auth.get_headers(),
            params={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            timeout=10,
        )
        if response.status_code == 200:
            return response.json()
        st.error(f"Could not load statistics: {response.json().get('detail')}")
    except requests.RequestException as e:
        st.error(f"Error fetching dashboard stats: {e}")
    return None


def get_recent_activities(limit=10):
    try:
        response = requests.get(
            f"{API_BASE_URL}/activities/",
            headers=auth.get_headers(),
            params={"limit": limit},
            timeout=10,
        )
        if response.status_code == 200:
            return response.json()
    except requests.RequestException:
        return []
    return []


def get_demo_status():
    try:
        response = requests.get(
            f"{API_BASE_URL}/demo/status", headers=auth.get_headers(), timeout=10
        )
        if response.status_code == 200:
            return response.json()
    except requests.RequestException:
        return None
    return None


def run_demo_action(action):
    try:
        response = requests.post(
            f"{API_BASE_URL}/demo/{action}", headers=auth.get_headers(), timeout=60
        )
        return response.status_code == 200, response.json()
    except requests.RequestException as e:
        return False, str(e)


def main():
    st.title("🏠 Maria Faz Dashboard")

    if not auth.is_authenticated():
        auth.render_login_form()
        return

    auth.render_user_info()
    render_navigation("01_Dashboard.py")

    today = date.today()
    col1, col2 = st.columns(2)
    with col1:
        start_date = st.date_input("From", value=today.replace(day=1))
    with col2:
        end_date = st.date_input("To", value=today)

    stats = get_dashboard_stats(start_date, end_date)
    if stats:
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Revenue", f"€ {float(stats['total_revenue']):,.2f}")
        with col2:
            st.metric("Net Profit", f"€ {float(stats['net_profit']):,.2f}")
        with col3:
            st.metric("Occupancy", f"{stats['occupancy_rate']:.1f}%")
        with col4:
            st.metric("Reservations", stats["reservations_count"],
                      help=f"{stats['active_properties']} active properties")

        if stats["top_properties"]:
            st.subheader("Top Properties")
            df = pd.DataFrame(stats["top_properties"])
            df["revenue"] = df["revenue"].astype(float)
            st.dataframe(
                df.rename(columns={
                    "name": "Property",
                    "occupancy_rate": "Occupancy (%)",
                    "revenue": "Revenue (€)",
                }).drop(columns=["property_id"]),
                use_container_width=True,
            )
            st.bar_chart(df.set_index("name")["occupancy_rate"])

    st.markdown("---")
    st.subheader("Recent Activity")
    activities = get_recent_activities()
    if activities:
        df = pd.DataFrame(activities)[["created_at", "type", "description"]]
        st.dataframe(df, use_container_width=True)
    else:
        st.info("No recent activity")

    if auth.can_write():
        st.markdown("---")
        st.subheader("Demo Data")
        demo_status = get_demo_status()
        if demo_status and demo_status["has_demo_data"]:
            st.write(f"Demo records: {demo_status['counts']}")

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Generate demo data"):
                success, result = run_demo_action("generate")
                if success:
                    st.success(f"Created: {result}")
                    st.rerun()
                else:
                    st.error(f"Failed: {result}")
        with col2:
            if st.button("Remove demo data"):
                success, result = run_demo_action("reset")
                if success:
                    st.success(f"Removed: {result}")
                    st.rerun()
                else:
                    st.error(f"Failed: {result}")


if __name__ == "__main__":
    main()
