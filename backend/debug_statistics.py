"""Debug script to check stored activities and statistics."""

from ecosphere.config import configure_logging
from ecosphere.database import SessionLocal, init_db
from ecosphere.services.calculator import compare_to_global_average, describe_emissions
from ecosphere.services.statistics import StatisticsService, category_breakdown
from ecosphere.services.store import CarbonStore

configure_logging()
init_db()

db = SessionLocal()
store = CarbonStore(db)

# Check total activities
activities = store.load_activities()
print(f"Total activities: {len(activities)}")

# Footprint per category
print("\n--- Footprint by Category ---")
for category, footprint in sorted(category_breakdown(activities).items()):
    print(f"{category}: {describe_emissions(footprint)}")

# Current statistics
stats = StatisticsService(store).current()
print("\n--- Statistics ---")
for key, value in stats.to_dict().items():
    print(f"{key}: {value}")

comparison = compare_to_global_average(stats.average_daily_footprint)
print(f"\n{comparison.comparison_label} ({comparison.percentage}%)")
print(comparison.recommendation)

# Sample a few activities
print("\n--- Latest Activities ---")
for act in store.load_activities_between()[:5]:
    print(f"ID: {act.id}, {act.category}/{act.type}: {act.value} {act.unit} -> {describe_emissions(act.carbon_footprint)}")

db.close()
