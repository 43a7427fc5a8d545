from linkwedding.models.user import User
from linkwedding.models.product import Product
from linkwedding.models.bank_account import BankAccount
from linkwedding.models.discount import DiscountCode
from linkwedding.models.order import Order
