from motor.motor_asyncio import AsyncIOMotorClient
from islandhr.config import settings


client = AsyncIOMotorClient(settings.MONGODB_URL)
database = client[settings.DATABASE_NAME]


admins_collection = database.admins
employees_collection = database.employees
leave_applications_collection = database.leave_applications
insurance_collection = database.insurance_records
system_activity_collection = database.system_activity
