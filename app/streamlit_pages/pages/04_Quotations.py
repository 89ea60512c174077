import streamlit as st
import requests
import pandas as pd
from app.streamlit_pages.components.auth import API_BASE_URL, auth
from app.streamlit_pages.components.navigation import render_navigation

st.set_page_config(
    page_title="Quotations",
    page_icon="🧾",
    layout="wide"
)

PROPERTY_TYPES = ["T0", "T1", "T2", "T3", "T4", "V1", "V2", "V3", "V4", "V5"]
STATUSES = ["draft", "sent", "accepted", "rejected", "expired"]


def get_quotations(status=None):
    try:
        params = {"status": status} if status else None
        response = requests.get(f"{API_BASE_URL}/quotations/",
                                headers=auth.get_headers(), params=params, timeout=10)
        if response.status_code == 200:
            return response.json()
    except requests.RequestException as e:
        st.error(f"Error loading quotations: {e}")
    return []


def calculate_price(pricing):
    """Price the quotation without saving it"""
    try:
        response = requests.post(f"{API_BASE_URL}/quotations/calculate",
                                 json=pricing, headers=auth.get_headers(), timeout=10)
        if response.status_code == 200:
            return response.json()
    except requests.RequestException:
        return None
    return None


def create_quotation(data):
    try:
        response = requests.post(f"{API_BASE_URL}/quotations/",
                                 json=data, headers=auth.get_headers(), timeout=10)
        if response.status_code == 200:
            return True, response.json()
        return False, response.json().get("detail")
    except requests.RequestException as e:
        return False, str(e)


def download_pdf(quotation_id):
    try:
        response = requests.get(f"{API_BASE_URL}/quotations/{quotation_id}/pdf",
                                headers=auth.get_headers(), timeout=30)
        if response.status_code == 200:
            return response.content
    except requests.RequestException as e:
        st.error(f"Error generating PDF: {e}")
    return None


def main():
    st.title("🧾 Quotations")

    if not auth.is_authenticated():
        auth.render_login_form()
        return

    auth.render_user_info()
    render_navigation("pages/04_Quotations.py")

    tab1, tab2 = st.tabs(["📋 Quotations", "➕ New Quotation"])

    with tab1:
        status_filter = st.selectbox("Status", ["All"] + STATUSES)
        quotations = get_quotations(None if status_filter == "All" else status_filter)

        if quotations:
            df = pd.DataFrame([
                {
                    "ID": q["id"],
                    "Client": q["client_name"],
                    "Type": q["property_type"],
                    "Area (m²)": q["total_area"],
                    "Total (€)": float(q["total_price"]),
                    "Status": q["status"],
                    "Valid until": q["valid_until"],
                }
                for q in quotations
            ])
            st.dataframe(df, use_container_width=True)

            options = {f"#{q['id']} {q['client_name']}": q["id"] for q in quotations}
            selected = st.selectbox("Quotation PDF:", [""] + list(options))
            if selected and st.button("Generate PDF"):
                content = download_pdf(options[selected])
                if content:
                    st.download_button(
                        "Download PDF",
                        data=content,
                        file_name=f"orcamento_{options[selected]}.pdf",
                        mime="application/pdf",
                    )
        else:
            st.info("No quotations found")

    with tab2:
        if not auth.can_write():
            st.info("Staff role required for creating quotations")
            return

        col1, col2 = st.columns(2)
        with col1:
            client_name = st.text_input("Client name")
            client_email = st.text_input("Client email")
            client_phone = st.text_input("Client phone")
            property_type = st.selectbox("Property type", PROPERTY_TYPES)
            property_address = st.text_input("Address")
            total_area = st.number_input("Total area (m²)", min_value=1, value=60)
            bedrooms = st.number_input("Bedrooms", min_value=0, value=1)
            bathrooms = st.number_input("Bathrooms", min_value=0, value=1)
        with col2:
            base_price = st.number_input("Base price (€)", min_value=0.0, value=50.0, step=5.0)
            has_exterior_space = st.checkbox("Exterior space")
            exterior_area = st.number_input("Exterior area (m²)", min_value=0, value=0,
                                            disabled=not has_exterior_space)
            is_duplex = st.checkbox("Duplex")
            has_bbq = st.checkbox("Barbecue")
            has_glass_surfaces = st.checkbox("Glass surfaces")
            has_garden = st.checkbox("Garden")
            notes = st.text_area("Notes")

        pricing = {
            "base_price": base_price,
            "has_exterior_space": has_exterior_space,
            "exterior_area": exterior_area if has_exterior_space else 0,
            "is_duplex": is_duplex,
            "has_bbq": has_bbq,
            "has_garden": has_garden,
            "has_glass_surfaces": has_glass_surfaces,
        }
        price = calculate_price(pricing)
        if price:
            col1, col2, col3 = st.columns(3)
            col1.metric("Base", f"€ {float(price['base_price']):,.2f}")
            col2.metric("Extras", f"€ {float(price['additional_price']):,.2f}")
            col3.metric("Total", f"€ {float(price['total_price']):,.2f}")

        if st.button("Save quotation", type="primary"):
            if not client_name:
                st.error("Client name is required")
            else:
                success, result = create_quotation({
                    **pricing,
                    "client_name": client_name,
                    "client_email": client_email or None,
                    "client_phone": client_phone or None,
                    "property_type": property_type,
                    "property_address": property_address or None,
                    "total_area": total_area,
                    "bedrooms": bedrooms,
                    "bathrooms": bathrooms,
                    "notes": notes or None,
                })
                if success:
                    st.success(f"Quotation #{result['id']} created")
                else:
                    st.error(f"Failed to create quotation: {result}")


if __name__ == "__main__":
    main()
