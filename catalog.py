"""
Galaxy Finance Quest - Content Catalogs
Static mission and achievement content, plus the builder that assembles a
fresh GameState from a UserProgress snapshot.

Every call returns new objects, so a reset never shares state with the
previous session. Edit this file to change game content.
"""

from models import (
    GameState, UserProgress, PlanetColony, Mission, Achievement,
    DifficultyLevel, ChallengeType, AchievementCategory, AchievementRarity,
)


def _mission(mid: str, title: str, description: str, difficulty: DifficultyLevel,
             rewards: int, content: str, challenge_type: ChallengeType) -> Mission:
    return Mission(
        id=mid, title=title, description=description,
        difficulty=difficulty, rewards=rewards,
        educational_content=content, challenge_type=challenge_type,
    )


def load_missions() -> list:
    """The mission catalog, in display order."""
    cadet = DifficultyLevel.BEGINNER
    officer = DifficultyLevel.INTERMEDIATE
    commander = DifficultyLevel.ADVANCED
    admiral = DifficultyLevel.EXPERT
    budgeting = ChallengeType.BUDGETING
    investing = ChallengeType.INVESTING
    saving = ChallengeType.SAVING
    debt = ChallengeType.DEBT_MANAGEMENT
    risk = ChallengeType.RISK_MANAGEMENT
    emergency = ChallengeType.EMERGENCY_PLANNING

    return [
        # ── Core track ──
        _mission("basic_budget", "Planetary Budget Basics",
                 "Learn to allocate resources for your new colony", cadet, 100,
                 "Budgeting is the foundation of financial success. Allocate 50% for "
                 "essentials, 30% for wants, and 20% for savings.", budgeting),
        _mission("compound_growth", "Stellar Investment Growth",
                 "Discover the power of compound interest in space trading", officer, 250,
                 "Compound interest is when you earn interest on both your original "
                 "investment and previously earned interest. Time is your greatest ally.",
                 investing),
        _mission("risk_management", "Asteroid Mining Risks",
                 "Learn to balance risk and reward in volatile markets", commander, 500,
                 "Diversification reduces risk. Never put all your resources in one "
                 "asteroid field.", risk),
        _mission("emergency_fund", "Emergency Fuel Reserves",
                 "Build an emergency fund for unexpected space travel", cadet, 150,
                 "An emergency fund should cover 3-6 months of expenses. It's your "
                 "financial safety net.", saving),
        _mission("debt_management", "Galactic Debt Elimination",
                 "Strategies to eliminate high-interest space loans", officer, 300,
                 "Pay off high-interest debt first. Use the debt avalanche method to "
                 "save on interest payments.", debt),

        # ── Budgeting ──
        _mission("zero_based_budget", "Zero-Based Colony Planning",
                 "Master the zero-based budgeting technique for maximum efficiency", officer, 200,
                 "Zero-based budgeting means every credit has a purpose. Income minus "
                 "expenses should equal zero.", budgeting),
        _mission("seasonal_budget", "Seasonal Resource Management",
                 "Plan for seasonal variations in colony income and expenses", commander, 400,
                 "Seasonal budgeting helps you prepare for predictable income "
                 "fluctuations throughout the year.", budgeting),
        _mission("family_budget", "Multi-Colony Budget Coordination",
                 "Manage budgets across multiple connected colonies", admiral, 600,
                 "Coordinating multiple budgets requires clear communication and shared "
                 "financial goals.", budgeting),

        # ── Investing ──
        _mission("stock_basics", "Galactic Stock Exchange Basics",
                 "Learn the fundamentals of space stock investing", cadet, 120,
                 "Stocks represent ownership in companies. Research before investing and "
                 "think long-term.", investing),
        _mission("etf_investing", "Diversified Space Funds",
                 "Understand ETFs and mutual funds for diversified investing", officer, 280,
                 "ETFs and mutual funds offer instant diversification and professional "
                 "management.", investing),
        _mission("retirement_planning", "Galactic Retirement Planning",
                 "Plan for your golden years in the outer rim", commander, 450,
                 "Start retirement planning early. Use tax-advantaged accounts and "
                 "automate contributions.", investing),
        _mission("crypto_basics", "Digital Currency Mining",
                 "Explore cryptocurrency and blockchain technology", admiral, 550,
                 "Cryptocurrency is volatile and speculative. Only invest what you can "
                 "afford to lose.", investing),

        # ── Saving ──
        _mission("automated_savings", "Automated Resource Collection",
                 "Set up automatic savings systems for your colony", cadet, 130,
                 "Automate your savings to pay yourself first. Set up automatic transfers "
                 "to savings accounts.", saving),
        _mission("high_yield_savings", "High-Yield Energy Storage",
                 "Maximize returns on your emergency fund", officer, 220,
                 "High-yield savings accounts offer better interest rates while keeping "
                 "your money accessible.", saving),
        _mission("goal_based_saving", "Mission-Specific Savings",
                 "Save for specific colony expansion goals", officer, 250,
                 "Set specific savings goals with deadlines. Break large goals into "
                 "smaller, manageable targets.", saving),

        # ── Debt management ──
        _mission("debt_snowball", "Debt Snowball Strategy",
                 "Use psychological momentum to eliminate small debts first", cadet, 180,
                 "The debt snowball method builds momentum by paying off smallest debts "
                 "first.", debt),
        _mission("debt_consolidation", "Loan Consolidation Protocol",
                 "Combine multiple debts into a single payment", officer, 320,
                 "Debt consolidation can simplify payments and potentially reduce "
                 "interest rates.", debt),
        _mission("credit_score", "Galactic Credit Rating",
                 "Understand and improve your credit score", commander, 380,
                 "Your credit score affects loan rates. Pay on time, keep balances low, "
                 "and monitor regularly.", debt),

        # ── Risk management ──
        _mission("insurance_basics", "Colony Protection Insurance",
                 "Protect your assets with proper insurance coverage", cadet, 160,
                 "Insurance protects against financial catastrophe. Get adequate coverage "
                 "for health, property, and life.", risk),
        _mission("portfolio_diversification", "Multi-Sector Investment Strategy",
                 "Spread investments across different sectors and asset classes", officer, 350,
                 "Diversification reduces risk by spreading investments across different "
                 "assets and sectors.", risk),
        _mission("market_volatility", "Surviving Market Storms",
                 "Navigate through economic downturns and market crashes", admiral, 650,
                 "Market volatility is normal. Stay calm, stick to your plan, and "
                 "consider it a buying opportunity.", risk),

        # ── Emergency planning ──
        _mission("disaster_recovery", "Colony Disaster Recovery Plan",
                 "Prepare financially for natural disasters and emergencies", officer, 290,
                 "Emergency planning includes insurance, emergency funds, and important "
                 "document storage.", emergency),
        _mission("estate_planning", "Legacy Planning Protocol",
                 "Plan for the transfer of wealth to future generations", commander, 480,
                 "Estate planning ensures your assets are distributed according to your "
                 "wishes. Include wills and trusts.", emergency),
        _mission("business_continuity", "Colony Business Continuity",
                 "Ensure your colony's operations can survive disruptions", admiral, 580,
                 "Business continuity planning protects against operational and "
                 "financial disruptions.", emergency),

        # ── Advanced concepts ──
        _mission("tax_optimization", "Galactic Tax Optimization",
                 "Minimize tax burden through legal strategies", commander, 420,
                 "Tax optimization involves using legal strategies to minimize tax "
                 "liability while maximizing wealth.", investing),
        _mission("real_estate", "Planetary Real Estate Investment",
                 "Explore real estate as an investment vehicle", admiral, 700,
                 "Real estate can provide income and appreciation. Consider location, "
                 "cash flow, and market trends.", investing),
        _mission("financial_independence", "Financial Independence Mission",
                 "Achieve complete financial freedom", admiral, 1000,
                 "Financial independence means your investments generate enough income "
                 "to cover all expenses.", investing),
    ]


def load_achievements() -> list:
    """The achievement catalog. Unlock rules live in achievements.py."""
    return [
        Achievement("first_mission", "Space Cadet",
                    "Complete your first financial mission", "star.fill",
                    AchievementCategory.MISSIONS, AchievementRarity.COMMON),
        Achievement("budget_master", "Budget Commander",
                    "Complete 2 budgeting missions", "chart.pie.fill",
                    AchievementCategory.LEARNING, AchievementRarity.RARE),
        Achievement("investment_guru", "Investment Admiral",
                    "Master investment concepts", "chart.line.uptrend.xyaxis",
                    AchievementCategory.LEARNING, AchievementRarity.EPIC),
        Achievement("risk_expert", "Risk Navigator",
                    "Complete risk management missions", "shield.fill",
                    AchievementCategory.LEARNING, AchievementRarity.RARE),
        Achievement("wealth_builder", "Galactic Tycoon",
                    "Accumulate 5,000 space credits", "dollarsign.circle.fill",
                    AchievementCategory.PROGRESS, AchievementRarity.EPIC),
        Achievement("colony_growth", "Colony Builder",
                    "Grow your colony to 500 inhabitants", "building.2.fill",
                    AchievementCategory.PROGRESS, AchievementRarity.RARE),
        Achievement("happy_colony", "Happiness Master",
                    "Achieve 90% colony happiness", "face.smiling.fill",
                    AchievementCategory.PROGRESS, AchievementRarity.EPIC),
        Achievement("experienced_commander", "Experienced Commander",
                    "Reach level 5", "star.circle.fill",
                    AchievementCategory.PROGRESS, AchievementRarity.RARE),
        Achievement("veteran_commander", "Veteran Commander",
                    "Reach level 10", "crown.fill",
                    AchievementCategory.PROGRESS, AchievementRarity.LEGENDARY),
    ]


def new_game_state(progress: UserProgress = None) -> GameState:
    """
    Assemble a GameState from the catalogs and a progress snapshot.
    Completion and unlock flags are re-applied from the snapshot id sets;
    ids no longer in the catalog are kept in the snapshot but ignored here.
    Mission availability is left for economy.update_mission_availability().
    """
    state = GameState(
        progress=progress if progress is not None else UserProgress(),
        colony=PlanetColony(),
    )
    for mission in load_missions():
        if mission.id in state.progress.completed_missions:
            mission.mark_completed()
        state.add_mission(mission)
    for achievement in load_achievements():
        if achievement.id in state.progress.unlocked_achievements:
            achievement.unlock()
        state.add_achievement(achievement)
    return state
