"""
FitGenius chatbot: keyword rule engine for workout and nutrition advice

No external model is involved. Replies are picked from fixed response tables
by matching keywords in the lowercased message.
"""
import random
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

GREETINGS = [
    "Hello! I'm FitSphere AI, your personal fitness assistant. How can I help you today?",
    "Hi there! Ready to crush your fitness goals? What can I help you with?",
    "Welcome to FitSphere! I'm here to help you with your fitness journey.",
    "Hey! I'm your AI fitness buddy. Let's make your fitness dreams a reality!",
]

WORKOUT_ADVICE = {
    "beginner": [
        "For beginners, I recommend starting with bodyweight exercises: push-ups, squats, lunges, and planks. "
        "Start with 3 sets of 10 reps each, 3 times per week.",
        "Begin with basic movements: wall push-ups, assisted squats, and walking. Focus on form over intensity.",
        "Start with 20-30 minute sessions: 10 min cardio (walking), 10 min strength (bodyweight), 10 min stretching.",
    ],
    "intermediate": [
        "Try circuit training: 30 seconds each of burpees, mountain climbers, jumping jacks, rest 30 seconds, "
        "repeat 3-5 rounds.",
        "Incorporate weights: dumbbell squats, bench press, deadlifts. 3-4 sets of 8-12 reps.",
        "Mix cardio and strength: 20 min HIIT, 20 min strength training, 10 min cool-down.",
    ],
    "advanced": [
        "Advanced workout: supersets with heavy weights, plyometric exercises, and high-intensity intervals.",
        "Try complex movements: Olympic lifts, advanced calisthenics, and sport-specific training.",
        "Advanced circuit: 45 seconds work, 15 seconds rest, 6-8 exercises, 4-5 rounds.",
    ],
}

NUTRITION_ADVICE = {
    "weight_loss": [
        "For weight loss: Create a 500-calorie daily deficit. Eat lean proteins, complex carbs, and healthy fats. "
        "Track your calories.",
        "Weight loss diet: High protein (1.6g per kg bodyweight), moderate carbs, low fat. Eat in a calorie deficit.",
        "Focus on whole foods: chicken, fish, vegetables, fruits, whole grains. "
        "Avoid processed foods and sugary drinks.",
    ],
    "muscle_gain": [
        "For muscle gain: Eat 300-500 calories above maintenance. 1.6-2.2g protein per kg bodyweight daily.",
        "Muscle building diet: High protein, moderate carbs, moderate fat. Eat every 3-4 hours.",
        "Post-workout: 20-30g protein within 30 minutes. Include carbs for glycogen replenishment.",
    ],
    "maintenance": [
        "Maintenance diet: Balanced macronutrients - 40% carbs, 30% protein, 30% fat. Eat at maintenance calories.",
        "Focus on nutrient-dense foods: vegetables, fruits, lean proteins, whole grains, healthy fats.",
        "Eat mindfully and listen to your body's hunger and fullness cues.",
    ],
}

DIET_PLANS = {
    "vegan": {
        "breakfast": "Oatmeal with berries, chia seeds, and almond milk. Add a banana for extra energy.",
        "lunch": "Quinoa bowl with chickpeas, roasted vegetables, and tahini dressing.",
        "dinner": "Lentil curry with brown rice and steamed broccoli.",
        "snacks": "Hummus with carrot sticks, mixed nuts, or a protein smoothie with plant-based protein powder.",
    },
    "vegetarian": {
        "breakfast": "Greek yogurt with granola and honey, or scrambled eggs with whole grain toast.",
        "lunch": "Mediterranean salad with feta cheese, olives, and olive oil dressing.",
        "dinner": "Grilled halloumi with quinoa and roasted vegetables.",
        "snacks": "Cottage cheese with fruit, hard-boiled eggs, or protein bars.",
    },
    "high_protein": {
        "breakfast": "Protein pancakes with whey protein, eggs, and oats.",
        "lunch": "Grilled chicken breast with sweet potato and green vegetables.",
        "dinner": "Salmon with quinoa and asparagus.",
        "snacks": "Protein shake, Greek yogurt, or turkey jerky.",
    },
}

# (keywords, emoji, title, exercises, advice), checked in order
MUSCLE_GROUPS = [
    (("chest", "push", "bench", "pecs"), "💪", "Chest",
     ["Push-ups", "Bench press", "Dumbbell flyes", "Incline press", "Decline push-ups"],
     "Start with 3 sets of 10-12 reps. Focus on proper form and controlled movements."),
    (("back", "pull", "row", "lats"), "🏋️", "Back",
     ["Pull-ups", "Deadlifts", "Rows", "Lat pulldowns", "Face pulls"],
     "Focus on proper form and mind-muscle connection."),
    (("legs", "squat", "thigh", "quads", "hamstrings"), "🦵", "Leg",
     ["Squats", "Deadlifts", "Lunges", "Leg press", "Calf raises"],
     "Start with bodyweight squats and progress gradually."),
    (("shoulder", "deltoid", "delts"), "💪", "Shoulder",
     ["Overhead press", "Lateral raises", "Front raises", "Rear delt flyes", "Shrugs"],
     "Start light to avoid injury and focus on form."),
    (("arm", "bicep", "tricep", "forearm"), "💪", "Arm",
     ["Bicep curls", "Tricep dips", "Hammer curls", "Skull crushers", "Preacher curls"],
     "Include both biceps and triceps for balanced development."),
    (("core", "abs", "stomach", "six pack"), "🔥", "Core",
     ["Planks", "Crunches", "Russian twists", "Leg raises", "Mountain climbers"],
     "Focus on stability, control, and breathing."),
]

MOTIVATION = [
    "Remember: Progress takes time. Focus on consistency over perfection.",
    "Every workout makes you stronger. Keep pushing forward!",
    "Your future self will thank you for the work you put in today.",
    "Small steps lead to big changes. Stay committed to your goals.",
    "You're stronger than you think. Believe in yourself!",
]

HELP_TEXT = """🤖 **I can help you with:**

💪 **Workouts**: Beginner to advanced training plans
🥗 **Nutrition**: Diet advice and meal planning
📊 **Fitness Goals**: Weight loss, muscle gain, maintenance
🎯 **Specific Exercises**: Chest, back, legs, arms, core
💪 **Motivation**: Encouragement and tips
📋 **Diet Plans**: Vegan, vegetarian, high-protein options

Just ask me anything about fitness and nutrition!"""

DEFAULT_REPLY = (
    "I'm here to help with your fitness journey! Ask me about workouts, nutrition, diet plans, "
    "or specific exercises. What would you like to know? 💪"
)

GREETING_KEYWORDS = ("hello", "hi", "hey", "start", "good morning", "good afternoon", "good evening")
WORKOUT_KEYWORDS = ("workout", "exercise", "training", "gym", "fitness")
NUTRITION_KEYWORDS = ("diet", "nutrition", "food", "eat", "meal", "calories", "protein", "carbs")
WEIGHT_LOSS_KEYWORDS = ("lose", "weight", "fat", "burn", "slim", "thin")
MUSCLE_GAIN_KEYWORDS = ("muscle", "gain", "build", "strength", "bulk", "mass")
DIET_PLAN_KEYWORDS = ("diet plan", "meal plan", "vegan", "vegetarian", "high protein", "protein diet")
MOTIVATION_KEYWORDS = ("motivation", "tired", "hard", "difficult", "struggle", "give up", "quit")
HELP_KEYWORDS = ("help", "what can you do", "how to use", "guide")


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


class FitGeniusChatbot:
    """Rule-based fitness assistant"""

    def __init__(self, chooser: Callable[[Sequence[str]], str] = random.choice):
        self.chooser = chooser

    def generate_response(self, message: str, user_profile: Optional[Dict[str, Any]] = None) -> str:
        """
        Pick a reply for a free-text message.

        Rules are tried in a fixed order and the first match wins: greetings,
        workouts, nutrition, diet plans, muscle groups, motivation, help.
        Matching is substring based, so "hi" also matches inside longer words.
        """
        text = message.lower()

        if contains_any(text, GREETING_KEYWORDS):
            return self.chooser(GREETINGS)

        if contains_any(text, WORKOUT_KEYWORDS):
            return self.chooser(WORKOUT_ADVICE[self.fitness_level(text)])

        if contains_any(text, NUTRITION_KEYWORDS):
            if contains_any(text, WEIGHT_LOSS_KEYWORDS):
                return self.chooser(NUTRITION_ADVICE["weight_loss"])
            if contains_any(text, MUSCLE_GAIN_KEYWORDS):
                return self.chooser(NUTRITION_ADVICE["muscle_gain"])
            return self.chooser(NUTRITION_ADVICE["maintenance"])

        if contains_any(text, DIET_PLAN_KEYWORDS):
            return self.generate_diet_plan(text, user_profile)

        for keywords, emoji, title, exercises, advice in MUSCLE_GROUPS:
            if contains_any(text, keywords):
                return f"{emoji} **{title} Exercises**: {', '.join(exercises)}. {advice}"

        if contains_any(text, MOTIVATION_KEYWORDS):
            return self.chooser(MOTIVATION)

        if contains_any(text, HELP_KEYWORDS):
            return HELP_TEXT

        return DEFAULT_REPLY

    def generate_diet_plan(self, requirements: str, user_profile: Optional[Dict[str, Any]] = None) -> str:
        """Format a one-day plan; vegan, then vegetarian, else high protein"""
        text = requirements.lower()
        if "vegan" in text:
            diet_type = "vegan"
        elif "vegetarian" in text:
            diet_type = "vegetarian"
        else:
            diet_type = "high_protein"

        plan = DIET_PLANS[diet_type]
        return (
            f"Here's your {diet_type.replace('_', ' ')} diet plan:\n\n"
            f"🌅 Breakfast: {plan['breakfast']}\n\n"
            f"🌞 Lunch: {plan['lunch']}\n\n"
            f"🌙 Dinner: {plan['dinner']}\n\n"
            f"🍎 Snacks: {plan['snacks']}\n\n"
            "💡 Tips:\n"
            "• Eat every 3-4 hours\n"
            "• Stay hydrated (8-10 glasses of water daily)\n"
            "• Include protein with every meal\n"
            "• Choose whole foods over processed options\n"
            "• Listen to your body's hunger cues\n\n"
            "Would you like me to customize this plan further based on your specific goals?"
        )

    @staticmethod
    def fitness_level(text: str) -> str:
        if contains_any(text, ("beginner", "start", "new", "first time")):
            return "beginner"
        if contains_any(text, ("advanced", "expert", "hard")):
            return "advanced"
        return "intermediate"


chatbot = FitGeniusChatbot()
