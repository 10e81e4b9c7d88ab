"""Substitute data shown while the backend is unreachable."""

import random
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta

from nutriai.domain.allergens import (
    ALLERGEN_CATALOG,
    AllergenAnalysis,
    AllergenFinding,
)
from nutriai.domain.gamification import (
    Achievement,
    Challenge,
    GamificationSnapshot,
    LeaderboardEntry,
    Reward,
    UserStats,
)
from nutriai.domain.health import DietaryRecommendation, HealthWarning
from nutriai.domain.inbox import InboxNotification
from nutriai.domain.micronutrients import MICRONUTRIENT_RDA, MicronutrientSample
from nutriai.domain.sleep import SleepAnalysis
from nutriai.domain.workouts import WorkoutRecommendation
from nutriai.services.aggregation import sum_nutrition
from nutriai.services.scoring import (
    round_half_up,
    safety_recommendations,
    safety_score,
)

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

SLEEP_TIPS = (
    "Avoid naps, especially in the afternoon. Power napping may help you get "
    "through the day, but if you find that you can't fall asleep at bedtime, "
    "eliminating even short catnaps could help.",
    "Follow a schedule to keep your biological clock in check. Go to bed and "
    "wake up at the same time every day, even on weekends.",
    "Create a restful environment. Keep your room cool, quiet and dark. Consider "
    "using room-darkening shades, earplugs, a fan or other devices to create an "
    "environment that suits your needs.",
    "Limit daytime naps. Long daytime naps can interfere with nighttime sleep. "
    "If you choose to nap, limit yourself to up to 30 minutes and avoid doing "
    "so late in the day.",
    "Include physical activity in your daily routine. Regular physical activity "
    "can promote better sleep, helping you to fall asleep faster and to enjoy "
    "deeper sleep.",
)

SHOPPING_LIST_FIXTURE: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Proteins",
        ("Chicken breast", "Salmon fillet", "Turkey breast", "Tofu", "Greek yogurt"),
    ),
    ("Grains", ("Oats", "Quinoa", "Whole wheat tortillas", "Granola")),
    (
        "Vegetables",
        (
            "Mixed greens",
            "Cherry tomatoes",
            "Cucumber",
            "Broccoli",
            "Carrots",
            "Spinach",
            "Mixed vegetables",
        ),
    ),
    ("Fruits", ("Mixed berries", "Fresh fruit")),
    ("Nuts & Seeds", ("Almonds",)),
    ("Dairy", ("Milk",)),
    ("Condiments", ("Honey", "Olive oil", "Lemon", "Soy sauce", "Mustard")),
    ("Herbs & Spices", ("Ginger", "Garlic")),
)


def _recipe(  # noqa: PLR0913
    name: str,
    ingredients: list[str],
    instructions: str,
    prep_time: int,
    cook_time: int,
    nutrition: tuple[int, int, int, int],
    difficulty: str,
    rating: float,
) -> dict[str, object]:
    calories, protein, carbs, fat = nutrition
    return {
        "name": name,
        "ingredients": ingredients,
        "instructions": instructions,
        "prepTime": prep_time,
        "cookTime": cook_time,
        "nutrition": {
            "calories": calories,
            "protein": protein,
            "carbs": carbs,
            "fat": fat,
        },
        "difficulty": difficulty,
        "rating": rating,
    }


def _monday_meals() -> dict[str, object]:
    return {
        "breakfast": _recipe(
            "Oatmeal with Berries and Nuts",
            ["Oats", "Mixed berries", "Almonds", "Honey", "Milk"],
            "Cook oats with milk, top with berries and nuts, drizzle with honey",
            10,
            5,
            (320, 12, 45, 15),
            "easy",
            4.5,
        ),
        "lunch": _recipe(
            "Grilled Chicken Salad",
            [
                "Chicken breast",
                "Mixed greens",
                "Cherry tomatoes",
                "Cucumber",
                "Olive oil",
            ],
            "Grill chicken, chop vegetables, assemble salad with dressing",
            15,
            12,
            (380, 35, 8, 22),
            "medium",
            4.8,
        ),
        "dinner": _recipe(
            "Salmon with Quinoa and Vegetables",
            ["Salmon fillet", "Quinoa", "Broccoli", "Carrots", "Lemon"],
            "Bake salmon, cook quinoa, steam vegetables, serve with lemon",
            20,
            25,
            (450, 40, 35, 18),
            "medium",
            4.7,
        ),
    }


def _tuesday_meals() -> dict[str, object]:
    return {
        "breakfast": _recipe(
            "Greek Yogurt Parfait",
            ["Greek yogurt", "Granola", "Honey", "Fresh fruit"],
            "Layer yogurt, granola, and fruit in a glass, drizzle with honey",
            5,
            0,
            (280, 18, 35, 8),
            "easy",
            4.3,
        ),
        "lunch": _recipe(
            "Turkey and Avocado Wrap",
            ["Turkey breast", "Avocado", "Whole wheat tortilla", "Spinach", "Mustard"],
            "Spread avocado on tortilla, add turkey and spinach, roll up",
            8,
            0,
            (320, 25, 28, 16),
            "easy",
            4.4,
        ),
        "dinner": _recipe(
            "Vegetarian Stir Fry",
            ["Tofu", "Mixed vegetables", "Soy sauce", "Ginger", "Garlic"],
            "Stir fry tofu and vegetables with soy sauce and aromatics",
            15,
            10,
            (380, 22, 25, 20),
            "medium",
            4.2,
        ),
    }


QUICK_PLAN_MEALS = (
    "Oatmeal with Berries",
    "Masala Dosa",
    "Idli with Sambar",
    "Veg Pulao",
    "Grilled Chicken Salad",
    "Chana Masala",
    "Paneer Bhurji",
    "Egg Fried Rice",
    "Quinoa Bowl",
    "Tofu Stir-fry",
    "Dal Khichdi",
    "Palak Paneer",
    "Tomato Soup with Toast",
    "Greek Yogurt Parfait",
    "Fruit Chaat",
)
QUICK_MEAL_TYPES = ("breakfast", "lunch", "dinner")
QuickRanges = tuple[tuple[int, int], tuple[int, int], tuple[int, int], tuple[int, int]]
# calories, protein, carbs, fat
QUICK_MEAL_RANGES: QuickRanges = ((250, 550), (8, 35), (20, 60), (5, 20))
QUICK_SNACK_RANGES: QuickRanges = ((120, 280), (3, 12), (8, 30), (2, 12))
QUICK_PLAN_TIPS = (
    "Stay hydrated and include one fruit with breakfast.",
    "Aim for a protein source in every meal.",
)

INBOX_FIXTURE = (
    (
        "meal",
        "Time for Lunch!",
        "It's 12:00 PM. Don't forget to log your lunch meal.",
        30,
        False,
        "high",
    ),
    (
        "hydration",
        "Stay Hydrated!",
        "You haven't logged water intake in 2 hours. Aim for 8 glasses daily.",
        120,
        False,
        "medium",
    ),
    (
        "medication",
        "Medication Reminder",
        "Time to take your diabetes medication (Metformin).",
        240,
        True,
        "high",
    ),
    (
        "health",
        "Health Check-in",
        "How are you feeling today? Log your mood and energy levels.",
        360,
        True,
        "medium",
    ),
    (
        "exercise",
        "Exercise Reminder",
        "You've been inactive for 3 hours. Time for a quick walk!",
        480,
        True,
        "low",
    ),
)

@dataclass
class FallbackGenerator:
    """Produces placeholder payloads shaped like real backend responses.

    Randomized content draws from the injected ``rng`` so that a seeded
    generator yields reproducible data.
    """

    rng: random.Random = field(default_factory=random.Random)

    @classmethod
    def seeded(cls, seed: int | None) -> "FallbackGenerator":
        return cls(rng=random.Random(seed))

    def allergen_findings(self) -> list[AllergenFinding]:
        """Pick one to three distinct catalog allergens with 60-100% confidence."""
        count = self.rng.randint(1, 3)
        findings = []
        for allergen_type in self.rng.sample(sorted(ALLERGEN_CATALOG), count):
            info = ALLERGEN_CATALOG[allergen_type]
            findings.append(
                AllergenFinding(
                    type=allergen_type,
                    severity=info.severity,
                    confidence=self.rng.random() * 0.4 + 0.6,
                    name=info.name,
                    description=info.description,
                )
            )
        return findings

    def allergen_analysis(
        self, image_name: str, now: datetime | None = None
    ) -> AllergenAnalysis:
        findings = self.allergen_findings()
        score = safety_score(findings)
        timestamp = (now or datetime.now(tz=UTC)).isoformat()
        return AllergenAnalysis(
            timestamp=timestamp,
            image_name=image_name,
            findings=findings,
            safety_score=score,
            recommendations=safety_recommendations(findings, score),
            simulated=True,
        )

    def weekly_micronutrients(self, today: date) -> list[MicronutrientSample]:
        """Seven days ending today, each nutrient drawn below 1.5x its RDA."""
        samples = []
        for index, label in enumerate(WEEKDAY_LABELS):
            day = today - timedelta(days=len(WEEKDAY_LABELS) - 1 - index)
            nutrients = {
                nutrient: self.rng.random() * rda * 1.5
                for nutrient, rda in MICRONUTRIENT_RDA.items()
            }
            samples.append(
                MicronutrientSample(
                    day=label, date=day.isoformat(), nutrients=nutrients
                )
            )
        return samples

    def meal_plan(self, week_start: datetime) -> dict[str, object]:
        return {
            "weekStart": week_start.isoformat(),
            "days": [
                {
                    "day": "Monday",
                    "date": week_start.isoformat(),
                    "meals": _monday_meals(),
                },
                {
                    "day": "Tuesday",
                    "date": (week_start + timedelta(days=1)).isoformat(),
                    "meals": _tuesday_meals(),
                },
            ],
        }

    def shopping_list(self) -> list[dict[str, object]]:
        """Raw category list, as the meal planning endpoint would send it."""
        return [
            {"category": category, "items": list(items)}
            for category, items in SHOPPING_LIST_FIXTURE
        ]

    def _between(self, low: int, high: int) -> int:
        return round_half_up(low + self.rng.random() * (high - low))

    def _quick_item(self, meal_type: str, ranges: QuickRanges) -> dict[str, object]:
        calories, protein, carbs, fat = ranges
        return {
            "name": self.rng.choice(QUICK_PLAN_MEALS),
            "mealType": meal_type,
            "nutrition": {
                "calories": self._between(*calories),
                "protein": self._between(*protein),
                "carbs": self._between(*carbs),
                "fat": self._between(*fat),
            },
            "seasonalIngredients": [],
        }

    def dynamic_meal_plan(self, today: date) -> dict[str, object]:
        """A quick local plan of four or five days with per-day totals."""
        days = []
        for index in range(self._between(4, 5)):
            meals = [
                self._quick_item(QUICK_MEAL_TYPES[slot], QUICK_MEAL_RANGES)
                for slot in range(self._between(2, 3))
            ]
            snacks = [
                self._quick_item("snack", QUICK_SNACK_RANGES)
                for _ in range(self._between(1, 2))
            ]
            totals = sum_nutrition([*meals, *snacks]).as_dict()
            days.append(
                {
                    "day": index + 1,
                    "date": (today + timedelta(days=index)).isoformat(),
                    "meals": meals,
                    "snacks": snacks,
                    "dailyNutrition": {
                        key: int(totals[key])
                        for key in ("calories", "protein", "carbs", "fat")
                    },
                }
            )
        return {
            "success": True,
            "mealPlan": {"meals": days},
            "shoppingList": {"estimatedCost": self._between(25, 60)},
            "recommendations": [{"message": tip} for tip in QUICK_PLAN_TIPS],
        }

    def inbox_notifications(self, now: datetime) -> list[InboxNotification]:
        return [
            InboxNotification(
                id=index + 1,
                type=kind,
                title=title,
                message=message,
                time=(now - timedelta(minutes=minutes_ago)).isoformat(),
                read=read,
                priority=priority,
            )
            for index, (kind, title, message, minutes_ago, read, priority) in enumerate(
                INBOX_FIXTURE
            )
        ]

    def gamification(self, user_name: str | None = None) -> GamificationSnapshot:
        return GamificationSnapshot(
            stats=UserStats(
                level=8,
                experience=1250,
                experience_to_next=2000,
                total_points=3420,
                rank="Gold",
                current_streak=7,
                longest_streak=14,
            ),
            achievements=self._achievements(),
            challenges=self._challenges(),
            leaderboard=[
                LeaderboardEntry(1, "Sarah Johnson", 5420, 12, 1),
                LeaderboardEntry(2, "Mike Chen", 4890, 11, 2),
                LeaderboardEntry(3, "Emma Davis", 4560, 10, 3),
                LeaderboardEntry(
                    4, user_name or "You", 3420, 8, 4, is_current_user=True
                ),
            ],
            streaks={
                "mealLogging": 7,
                "hydration": 5,
                "exercise": 3,
                "sleep": 2,
                "healthCheckins": 4,
            },
            rewards=[
                Reward(
                    1,
                    "Premium Recipe Unlock",
                    "Unlock 10 premium healthy recipes",
                    1000,
                    unlocked=True,
                ),
                Reward(
                    2,
                    "Custom Avatar",
                    "Unlock a special avatar for your profile",
                    2000,
                    progress=3420,
                ),
                Reward(
                    3,
                    "Advanced Analytics",
                    "Access to detailed health analytics",
                    3000,
                    progress=3420,
                ),
            ],
            simulated=True,
        )

    def _achievements(self) -> list[Achievement]:
        return [
            Achievement(
                1,
                "First Steps",
                "Log your first meal",
                "nutrition",
                50,
                1,
                1,
                unlocked=True,
                unlocked_at="2024-01-15T10:30:00Z",
            ),
            Achievement(
                2,
                "Hydration Master",
                "Log water intake for 7 consecutive days",
                "hydration",
                100,
                7,
                7,
                rarity="uncommon",
                unlocked=True,
                unlocked_at="2024-01-20T14:20:00Z",
            ),
            Achievement(
                3,
                "Consistency King",
                "Log meals for 30 consecutive days",
                "streak",
                500,
                7,
                30,
                rarity="rare",
            ),
            Achievement(
                4,
                "Health Warrior",
                "Complete 10 health check-ins",
                "health",
                200,
                6,
                10,
                rarity="uncommon",
            ),
            Achievement(
                5,
                "Nutrition Expert",
                "Log 100 different foods",
                "nutrition",
                300,
                45,
                100,
                rarity="rare",
            ),
        ]

    def _challenges(self) -> list[Challenge]:
        return [
            Challenge(
                1,
                "7-Day Meal Logging",
                "Log at least one meal every day for a week",
                "streak",
                150,
                5,
                7,
                difficulty="easy",
                duration="7 days",
                participants=45,
            ),
            Challenge(
                2,
                "Hydration Challenge",
                "Drink 8 glasses of water daily for 5 days",
                "hydration",
                200,
                3,
                5,
                duration="5 days",
                participants=32,
            ),
            Challenge(
                3,
                "Protein Power",
                "Meet your protein goal for 3 consecutive days",
                "nutrition",
                100,
                2,
                3,
                duration="3 days",
                participants=28,
            ),
        ]

    def workout_recommendations(self) -> list[WorkoutRecommendation]:
        return [
            WorkoutRecommendation(
                1,
                "cardio",
                "Morning Cardio Session",
                "Start your day with a 30-minute cardio workout to boost metabolism",
                30,
                "moderate",
                250,
                "legs, core",
            ),
            WorkoutRecommendation(
                2,
                "strength",
                "Upper Body Strength",
                "Focus on chest, back, and arms with this comprehensive workout",
                45,
                "high",
                300,
                "chest, back, arms",
            ),
            WorkoutRecommendation(
                3,
                "flexibility",
                "Yoga Flow",
                "Improve flexibility and reduce stress with this gentle yoga session",
                20,
                "low",
                100,
                "full body",
            ),
            WorkoutRecommendation(
                4,
                "cardio",
                "Cycling Workout",
                "High-intensity cycling session for cardiovascular health",
                25,
                "high",
                200,
                "legs",
            ),
        ]

    def health_warnings(self) -> list[HealthWarning]:
        return [
            HealthWarning(
                "high_sugar",
                "High Sugar Intake",
                "Your average daily sugar intake is 65g, which is above the "
                "recommended 50g. High sugar consumption can increase the risk of "
                "diabetes and other health issues.",
                "high",
            ),
            HealthWarning(
                "low_fiber",
                "Low Fiber Intake",
                "Your average daily fiber intake is 18g, which is below the "
                "recommended 25g. Fiber is important for digestive health.",
                "medium",
            ),
        ]

    def dietary_recommendations(self) -> list[DietaryRecommendation]:
        return [
            DietaryRecommendation(
                "sugar_reduction",
                "Reduce Sugar Intake",
                [
                    "Replace sugary drinks with water or herbal tea",
                    "Choose fresh fruits instead of desserts",
                    "Read food labels and avoid products with added sugars",
                ],
                "high",
            ),
            DietaryRecommendation(
                "fiber_increase",
                "Increase Fiber Intake",
                [
                    "Add more vegetables to every meal",
                    "Choose whole grains over refined grains",
                    "Include fruits with skin (apples, pears)",
                ],
                "medium",
            ),
        ]

    def sleep_analysis(self) -> SleepAnalysis:
        return SleepAnalysis(
            weekly_data=[0.0] * 7, weekly_deficit=56.0, tips=list(SLEEP_TIPS)
        )
