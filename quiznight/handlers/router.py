from aiogram import Router

from quiznight.handlers.formats import router as formats_router
from quiznight.handlers.quiz import router as quiz_router
from quiznight.handlers.rounds import router as rounds_router
from quiznight.handlers.results import router as results_router
from quiznight.handlers.common import router as common_router

router = Router()

router.include_router(formats_router)
router.include_router(quiz_router)
router.include_router(rounds_router)
router.include_router(results_router)
router.include_router(common_router)  # LAST = fallback only
