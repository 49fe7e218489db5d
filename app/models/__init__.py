# app/models/__init__.py
from app.models.user_models import User
from app.models.activity_models import UserActivity
from app.models.customer_models import Customer
from app.models.tax_models import TaxRule
from app.models.discount_models import DiscountCode
from app.models.setting_models import Setting
from app.models.order_models import Order, OrderItem, OrderStatus, PaymentStatus
