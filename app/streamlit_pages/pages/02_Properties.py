import streamlit as st
import requests
import pandas as pd
from app.streamlit_pages.components.auth import API_BASE_URL, auth
from app.streamlit_pages.components.navigation import render_navigation

st.set_page_config(
    page_title="Properties",
    page_icon="🏡",
    layout="wide"
)


def api_get(path, params=None):
    try:
        response = requests.get(
            f"{API_BASE_URL}{path}", headers=auth.get_headers(), params=params, timeout=10
        )
        if response.status_code == 200:
            return response.json()
    except requests.RequestException as e:
        st.error(f"Error loading {path}: {e}")
    return []


def save_property(data, property_id=None):
    """Create or update a property"""
    try:
        if property_id:
            response = requests.put(f"{API_BASE_URL}/properties/{property_id}",
                                    json=data, headers=auth.get_headers(), timeout=10)
        else:
            response = requests.post(f"{API_BASE_URL}/properties/",
                                     json=data, headers=auth.get_headers(), timeout=10)
        if response.status_code == 200:
            return True, None
        return False, response.json().get("detail")
    except requests.RequestException as e:
        return False, str(e)


def delete_property(property_id):
    try:
        response = requests.delete(f"{API_BASE_URL}/properties/{property_id}",
                                   headers=auth.get_headers(), timeout=10)
        if response.status_code == 200:
            return True, None
        return False, response.json().get("detail")
    except requests.RequestException as e:
        return False, str(e)


def create_owner(data):
    try:
        response = requests.post(f"{API_BASE_URL}/owners/",
                                 json=data, headers=auth.get_headers(), timeout=10)
        if response.status_code == 200:
            return True, None
        return False, response.json().get("detail")
    except requests.RequestException as e:
        return False, str(e)


def property_form(key, owners, teams, current=None):
    """Render the property fields and return the payload on submit"""
    current = current or {}
    owner_names = {owner["name"]: owner["id"] for owner in owners}
    team_names = {"(none)": None, **{team["name"]: team["id"] for team in teams}}
    owner_labels = list(owner_names)
    team_labels = list(team_names)

    with st.form(key):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Name", value=current.get("name", ""))
            aliases = st.text_input(
                "Aliases (comma separated)", value=", ".join(current.get("aliases", []))
            )
            owner_index = next(
                (i for i, label in enumerate(owner_labels)
                 if owner_names[label] == current.get("owner_id")), 0
            )
            owner = st.selectbox("Owner", owner_labels, index=owner_index)
            team_index = next(
                (i for i, label in enumerate(team_labels)
                 if team_names[label] == current.get("cleaning_team_id")), 0
            )
            team = st.selectbox("Cleaning team", team_labels, index=team_index)
            active = st.checkbox("Active", value=current.get("active", True))
        with col2:
            cleaning_cost = st.number_input(
                "Cleaning cost (€)", min_value=0.0, value=float(current.get("cleaning_cost", 0)))
            check_in_fee = st.number_input(
                "Check-in fee (€)", min_value=0.0, value=float(current.get("check_in_fee", 0)))
            commission = st.number_input(
                "Commission (%)", min_value=0.0, max_value=100.0,
                value=float(current.get("commission", 0)))
            team_payment = st.number_input(
                "Team payment (€)", min_value=0.0, value=float(current.get("team_payment", 0)))
            monthly_fixed_cost = st.number_input(
                "Monthly fixed cost (€)", min_value=0.0,
                value=float(current.get("monthly_fixed_cost", 0)))

        if st.form_submit_button("Save", type="primary"):
            if not name or not owner_labels:
                st.error("Name and owner are required")
                return None
            return {
                "name": name,
                "aliases": [alias.strip() for alias in aliases.split(",") if alias.strip()],
                "owner_id": owner_names[owner],
                "cleaning_team_id": team_names[team],
                "cleaning_cost": cleaning_cost,
                "check_in_fee": check_in_fee,
                "commission": commission,
                "team_payment": team_payment,
                "monthly_fixed_cost": monthly_fixed_cost,
                "active": active,
            }
    return None


def main():
    st.title("🏡 Properties")

    if not auth.is_authenticated():
        auth.render_login_form()
        return

    auth.render_user_info()
    render_navigation("pages/02_Properties.py")

    can_write = auth.can_write()
    owners = api_get("/owners/")
    teams = api_get("/cleaning-teams/")

    tab1, tab2, tab3 = st.tabs(["📋 Properties", "➕ Add Property", "👤 Owners"])

    with tab1:
        search = st.text_input("Search by name")
        properties = api_get("/properties/", {"search": search} if search else None)
        owner_by_id = {owner["id"]: owner["name"] for owner in owners}

        if properties:
            df = pd.DataFrame([
                {
                    "ID": prop["id"],
                    "Name": prop["name"],
                    "Owner": owner_by_id.get(prop["owner_id"], ""),
                    "Cleaning (€)": float(prop["cleaning_cost"]),
                    "Check-in (€)": float(prop["check_in_fee"]),
                    "Commission (%)": float(prop["commission"]),
                    "Active": prop["active"],
                }
                for prop in properties
            ])
            st.dataframe(df, use_container_width=True)

            options = {f"{prop['name']} (#{prop['id']})": prop for prop in properties}
            selected = st.selectbox("Choose property:", [""] + list(options))
            if selected:
                prop = options[selected]
                stats = api_get(f"/properties/{prop['id']}/statistics")
                if stats:
                    col1, col2, col3 = st.columns(3)
                    col1.metric("Revenue (month)", f"€ {float(stats['total_revenue']):,.2f}")
                    col2.metric("Net profit", f"€ {float(stats['net_profit']):,.2f}")
                    col3.metric("Occupancy", f"{stats['occupancy_rate']:.1f}%")

                if can_write:
                    payload = property_form(f"edit_property_{prop['id']}", owners, teams, prop)
                    if payload:
                        success, error = save_property(payload, prop["id"])
                        if success:
                            st.success("Property updated successfully!")
                            st.rerun()
                        else:
                            st.error(f"Failed to update property: {error}")

                    if st.button("Delete property", type="secondary"):
                        success, error = delete_property(prop["id"])
                        if success:
                            st.success("Property deleted successfully!")
                            st.rerun()
                        else:
                            st.error(f"Failed to delete property: {error}")
        else:
            st.info("No properties found")

    with tab2:
        if not can_write:
            st.info("Staff role required for adding properties")
        elif not owners:
            st.warning("Create an owner first")
        else:
            payload = property_form("add_property", owners, teams)
            if payload:
                success, error = save_property(payload)
                if success:
                    st.success("Property created successfully!")
                    st.rerun()
                else:
                    st.error(f"Failed to create property: {error}")

    with tab3:
        if owners:
            st.dataframe(
                pd.DataFrame(owners)[["id", "name", "company", "email", "phone"]],
                use_container_width=True,
            )
        if can_write:
            with st.form("add_owner"):
                name = st.text_input("Owner name")
                company = st.text_input("Company")
                email = st.text_input("Email")
                phone = st.text_input("Phone")
                if st.form_submit_button("Add owner"):
                    success, error = create_owner(
                        {"name": name, "company": company or None,
                         "email": email or None, "phone": phone or None}
                    )
                    if success:
                        st.success("Owner created successfully!")
                        st.rerun()
                    else:
                        st.error(f"Failed to create owner: {error}")


if __name__ == "__main__":
    main()
