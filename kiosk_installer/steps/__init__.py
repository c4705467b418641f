from .step_10_update_package_list import UpdatePackageListStep
from .step_20_upgrade_packages import UpgradePackagesStep
from .step_30_install_wayland import InstallWaylandStep
from .step_40_install_browser import InstallBrowserStep
from .step_50_configure_greetd import ConfigureGreetdStep
from .step_60_autostart_browser import AutostartBrowserStep
from .step_70_hide_cursor import HideCursorStep
from .step_80_splash_screen import SplashScreenStep
from .step_90_screen_resolution import ScreenResolutionStep
from .step_100_screen_orientation import ScreenOrientationStep
from .step_110_hdmi_audio import HdmiAudioStep
from .step_120_cec_remote import CecRemoteStep
from .step_130_clean_apt_cache import CleanAptCacheStep
from .step_140_reboot import RebootStep

__all__ = [
    "UpdatePackageListStep",
    "UpgradePackagesStep",
    "InstallWaylandStep",
    "InstallBrowserStep",
    "ConfigureGreetdStep",
    "AutostartBrowserStep",
    "HideCursorStep",
    "SplashScreenStep",
    "ScreenResolutionStep",
    "ScreenOrientationStep",
    "HdmiAudioStep",
    "CecRemoteStep",
    "CleanAptCacheStep",
    "RebootStep",
]
