"""
Centralized logging for the dStruct pipeline.
"""

import logging
from typing import Optional


class Logger:
    """Centralized logging for the dStruct pipeline"""

    def __init__(self, log_file: Optional[str] = None, level: Optional[int] = None):
        """Initialize logger with optional file output"""
        self.logger = logging.getLogger("dstruct")
        if level is not None:
            self.logger.setLevel(level)
        elif self.logger.level == logging.NOTSET:
            self.logger.setLevel(logging.INFO)

        # Services share one logger; only a new log file resets its handlers
        if log_file or not self.logger.handlers:
            for handler in self.logger.handlers:
                handler.close()
            self.logger.handlers.clear()

            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

            if log_file:
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)

    def log_step(self, step: str, details: str) -> None:
        """Log a processing step with details"""
        self.logger.info(f"🔍 {step}: {details}")

    def log_debug(self, step: str, details: str) -> None:
        """Log a per-unit detail that would flood batch output at INFO"""
        self.logger.debug(f"{step}: {details}")

    def log_error(self, error: Exception, context: str) -> None:
        """Log an error with context"""
        self.logger.error(f"❌ Error in {context}: {str(error)}", exc_info=True)

    def log_warning(self, warning: str) -> None:
        """Log a warning message"""
        self.logger.warning(f"⚠️ {warning}")

    def log_success(self, message: str) -> None:
        """Log a success message"""
        self.logger.info(f"✅ {message}")

    def log_save(self, file_path: str) -> None:
        """Log a file save operation"""
        self.logger.info(f"💾 Saved to: {file_path}")

    def log_table_shape(self, table_name: str, shape: tuple) -> None:
        """Log reactivity table shape information"""
        self.logger.info(f"📊 {table_name} shape: {shape}")

    def log_threshold(self, threshold_name: str, value: float) -> None:
        """Log threshold information"""
        self.logger.info(f"🎯 {threshold_name}: {value:.4f}")

    def log_test(self, region: str, p_value: float, effect_size: float) -> None:
        """Log the outcome of a signed-rank test at debug level"""
        self.logger.debug(
            f"📈 Region {region}: p={p_value:.6g}, median delta d={effect_size:.4f}"
        )

    def log_statistics(self, stat_name: str, value: float) -> None:
        """Log statistical values"""
        self.logger.info(f"📈 {stat_name}: {value:.6g}")

    def log_regions(self, unit_id: str, n_regions: int) -> None:
        """Log how many records a transcript or region produced"""
        self.logger.debug(f"🧬 {unit_id}: {n_regions} regions")

    def debug_enabled(self) -> bool:
        """True when debug records would be emitted"""
        return self.logger.isEnabledFor(logging.DEBUG)
