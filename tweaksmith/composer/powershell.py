"""
PowerShell generators for exported scripts.

An exported artifact is laid out as::

    [restore point function + guarded call]   only with auto_create_restore_point
    "Applying tweaks..." status line          always
    [Invoke-AtomicTweak function]             combined artifacts only
    <tweak code>
    [execution summary]
    [completion check: success banner + reboot prompt | failure banner + exit 1]

The reboot countdown lives inside the generated text; nothing here waits.
"""
from __future__ import annotations

from typing import List, Sequence, Tuple

DEFAULT_REBOOT_TIMEOUT = 30
RESTORE_POINT_NAME = "Tweaksmith Restore Point"


def _render(template: str, **values: object) -> str:
    """Fill ``@@NAME@@`` markers (PowerShell already uses ``$`` and braces)."""
    for name, value in values.items():
        template = template.replace(f"@@{name.upper()}@@", str(value))
    return template


def escape_double_quoted(text: str) -> str:
    """Escape text for a PowerShell double-quoted string."""
    return text.replace("`", "``").replace('"', '`"').replace("$", "`$")


# ============================================================================
# Atomic execution
# ============================================================================

ATOMIC_TWEAK_FUNCTION = r"""# Run each tweak in isolation so one failure does not stop the rest
function Invoke-AtomicTweak {
    [CmdletBinding()]
    param (
        [Parameter(Mandatory=$true)]
        [string]$TweakName,

        [Parameter(Mandatory=$true)]
        [scriptblock]$TweakScript
    )

    Write-Host "Executing: $TweakName" -ForegroundColor Cyan

    $tweakResult = @{
        Name = $TweakName
        Status = "FAILED"
        ErrorMessage = ""
    }

    $errorCountBefore = $Error.Count

    try {
        $ErrorActionPreference = "Continue"
        $global:LASTEXITCODE = $null

        & $TweakScript

        $errorMessage = ""
        if ($LASTEXITCODE -ne 0 -and $LASTEXITCODE -ne $null) {
            $errorMessage = "Script exited with error code: $LASTEXITCODE"
        } elseif ($Error.Count -gt $errorCountBefore) {
            if ($Error[0]) {
                $errorMessage = $Error[0].ToString()
            } else {
                $errorMessage = "An error occurred during execution"
            }
        }

        if ($errorMessage) {
            $tweakResult.ErrorMessage = $errorMessage
            Write-Host "  Status: FAILED - $errorMessage" -ForegroundColor Red
        } else {
            $tweakResult.Status = "OK"
            Write-Host "  Status: OK" -ForegroundColor Green
        }
    } catch {
        $tweakResult.ErrorMessage = $_.Exception.Message
        Write-Host "  Status: FAILED - $($tweakResult.ErrorMessage)" -ForegroundColor Red
    } finally {
        # Drop only the errors this tweak added
        $errorsToRemove = $Error.Count - $errorCountBefore
        for ($i = 0; $i -lt $errorsToRemove; $i++) {
            if ($Error.Count -gt 0) {
                $Error.RemoveAt(0)
            }
        }
        $global:LASTEXITCODE = $null
    }

    $script:TweakResults += $tweakResult
    Write-Host ""
}

$script:TweakResults = @()
"""


def wrap_atomic(title: str, code: str, index: int) -> str:
    """Wrap one tweak block in an ``Invoke-AtomicTweak`` call."""
    name = escape_double_quoted(title.strip() or f"Tweak {index + 1}")
    return f'Invoke-AtomicTweak "{name}" {{\n{code}\n}}'


def wrap_tweaks_atomic(blocks: Sequence[Tuple[str, str]]) -> str:
    """Wrap (title, code) blocks for atomic execution; empty blocks are skipped."""
    wrapped: List[str] = [
        wrap_atomic(title, code, i)
        for i, (title, code) in enumerate(blocks)
        if code.strip()
    ]
    if not wrapped:
        return ""
    return ATOMIC_TWEAK_FUNCTION + "\n" + "\n\n".join(wrapped)


# ============================================================================
# Preamble
# ============================================================================

_CONFIRM_CONTINUE = r"""$response = Read-Host "Do you want to continue applying tweaks without a restore point? (Y/N)"
            if ($response -ne "Y" -and $response -ne "y") {
                Write-Host "Operation cancelled by user." -ForegroundColor Yellow
                throw "User cancelled restore point creation"
            }
            return $false"""

RESTORE_POINT_FUNCTION = r"""# Create a system restore point before any change is made
function New-TweaksmithRestorePoint {
    Write-Host ""
    Write-Host "========================================" -ForegroundColor Cyan
    Write-Host "Creating System Restore Point" -ForegroundColor Cyan
    Write-Host "========================================" -ForegroundColor Cyan
    Write-Host ""

    try {
        $isAdmin = ([Security.Principal.WindowsPrincipal] [Security.Principal.WindowsIdentity]::GetCurrent()).IsInRole([Security.Principal.WindowsBuiltInRole]::Administrator)

        if (-not $isAdmin) {
            Write-Host "ERROR: Administrator privileges are required to create a restore point." -ForegroundColor Red
            Write-Host "Please run this script as Administrator." -ForegroundColor Red
            Write-Host ""
            @@CONFIRM@@
        }

        $restoreEnabled = (Get-ComputerRestore -Drive "C:").Enabled
        if (-not $restoreEnabled) {
            Write-Host "WARNING: System Restore is disabled on drive C:." -ForegroundColor Yellow
            Write-Host "You may need to enable System Restore in System Properties." -ForegroundColor Yellow
            Write-Host ""
            @@CONFIRM@@
        }

        $restorePointName = "@@NAME@@"
        Write-Host "Creating restore point: $restorePointName" -ForegroundColor Cyan
        Write-Host "This may take 1-2 minutes, please be patient..." -ForegroundColor Gray

        try {
            Checkpoint-Computer -Description $restorePointName -RestorePointType "MODIFY_SETTINGS" -ErrorAction Stop
            Write-Host "Restore point created successfully!" -ForegroundColor Green
            Write-Host ""
            return $true
        } catch {
            Write-Host "ERROR: Failed to create restore point." -ForegroundColor Red
            Write-Host "Error details: $_" -ForegroundColor Red
            Write-Host ""
            @@CONFIRM@@
        }
    } catch {
        if ("$_" -eq "User cancelled restore point creation") {
            throw
        }
        Write-Host "ERROR: An exception occurred while creating restore point: $_" -ForegroundColor Red
        Write-Host ""
        @@CONFIRM@@
    }
}

$restorePointCreated = New-TweaksmithRestorePoint
if (-not $restorePointCreated) {
    Write-Host "Continuing without restore point as requested by user." -ForegroundColor Yellow
    Write-Host ""
}
"""

APPLYING_STATUS = r"""$script:ErrorCountBefore = $Error.Count
Write-Host "Applying tweaks..." -ForegroundColor Cyan
Write-Host ""
"""


def restore_point_block() -> str:
    """Restore point function plus the guarded call that asks before continuing."""
    return _render(RESTORE_POINT_FUNCTION, confirm=_CONFIRM_CONTINUE, name=RESTORE_POINT_NAME)


def build_preamble(create_restore_point: bool) -> str:
    """Preamble; the "applying" status line is always present."""
    if create_restore_point:
        return restore_point_block() + "\n" + APPLYING_STATUS
    return APPLYING_STATUS


# ============================================================================
# Postamble
# ============================================================================

SUMMARY_BLOCK = r"""
Write-Host ""
Write-Host "========================================" -ForegroundColor Cyan
Write-Host "Tweak Execution Summary" -ForegroundColor Cyan
Write-Host "========================================" -ForegroundColor Cyan
if ($script:TweakResults -and $script:TweakResults.Count -gt 0) {
    $failedTweaks = @($script:TweakResults | Where-Object { $_.Status -eq "FAILED" }).Count
    Write-Host "Total Tweaks: $($script:TweakResults.Count)" -ForegroundColor White
    Write-Host "Failed: $failedTweaks" -ForegroundColor $(if ($failedTweaks -gt 0) { "Red" } else { "Gray" })
    foreach ($result in $script:TweakResults) {
        $statusColor = if ($result.Status -eq "OK") { "Green" } else { "Red" }
        Write-Host "  [$($result.Status)] " -NoNewline -ForegroundColor $statusColor
        Write-Host "$($result.Name)" -ForegroundColor White
        if ($result.Status -eq "FAILED" -and $result.ErrorMessage) {
            Write-Host "      Error: $($result.ErrorMessage)" -ForegroundColor Yellow
        }
    }
}
"""

COMPLETION_BLOCK = r"""
$ErrorActionPreference = "Continue"
$scriptSuccess = $true
$errorMessage = ""

if ($script:TweakResults -and $script:TweakResults.Count -gt 0) {
    $failedTweaks = @($script:TweakResults | Where-Object { $_.Status -eq "FAILED" }).Count
    if ($failedTweaks -gt 0) {
        $scriptSuccess = $false
        $errorMessage = "$failedTweaks tweak(s) failed during execution. See summary above for details."
    }
} elseif ($LASTEXITCODE -ne 0 -and $LASTEXITCODE -ne $null) {
    $scriptSuccess = $false
    $errorMessage = "Script exited with error code: $LASTEXITCODE"
} elseif ($Error.Count -gt $script:ErrorCountBefore) {
    $scriptSuccess = $false
    $errorMessage = $Error[0].ToString()
}

Write-Host ""
Write-Host "========================================" -ForegroundColor Cyan
if ($scriptSuccess) {
    Write-Host "[SUCCESS] Tweaks Applied Successfully!" -ForegroundColor Green
    Write-Host "========================================" -ForegroundColor Green
    Write-Host ""
    Write-Host "Some tweaks require a system restart to take full effect." -ForegroundColor Yellow
    Write-Host "  [Y] - Restart system automatically now" -ForegroundColor Green
    Write-Host "  [N] - Restart manually later" -ForegroundColor Yellow
    Write-Host "If no option is selected within @@TIMEOUT@@ seconds, the system will restart automatically." -ForegroundColor Gray
    Write-Host ""

    $restartChoice = $null
    $timeoutSeconds = @@TIMEOUT@@
    $startTime = Get-Date

    $keyAvailableSupported = $false
    try {
        $null = $Host.UI.RawUI.KeyAvailable
        $keyAvailableSupported = $true
    } catch {
        $keyAvailableSupported = $false
    }

    while ($keyAvailableSupported -and -not $restartChoice) {
        $elapsed = (Get-Date) - $startTime
        $remaining = [math]::Max(0, $timeoutSeconds - [math]::Floor($elapsed.TotalSeconds))
        if ($remaining -le 0) {
            Write-Host ""
            Write-Host "No response received. Restarting system automatically..." -ForegroundColor Yellow
            $restartChoice = "Y"
            break
        }

        try {
            if ($Host.UI.RawUI.KeyAvailable) {
                $key = $Host.UI.RawUI.ReadKey("NoEcho,IncludeKeyDown")
                $char = $key.Character.ToString().ToUpper()
                if ($char -eq "Y" -or $char -eq "N") {
                    $restartChoice = $char
                    break
                }
            }
        } catch {
            $keyAvailableSupported = $false
            break
        }

        $cr = [char]13
        Write-Host "$($cr)Time remaining: $remaining seconds (Press Y to restart now, N to restart later)     " -NoNewline -ForegroundColor Cyan
        Start-Sleep -Milliseconds 200
    }

    if (-not $restartChoice) {
        Write-Host ""
        $response = Read-Host "Enter your choice (Y/N, default: Y)"
        if ($response -eq "N" -or $response -eq "n") {
            $restartChoice = "N"
        } else {
            $restartChoice = "Y"
        }
    }

    Write-Host ""
    if ($restartChoice -eq "Y") {
        Write-Host "Restarting system in 5 seconds... Press Ctrl+C to cancel" -ForegroundColor Yellow
        Start-Sleep -Seconds 5
        try {
            Restart-Computer -Force -ErrorAction Stop
        } catch {
            Write-Host "Failed to restart system automatically: $_" -ForegroundColor Red
            Write-Host "Please restart your system manually." -ForegroundColor Yellow
        }
    } else {
        Write-Host "You chose to restart manually later." -ForegroundColor Yellow
        Write-Host "Please restart your system when convenient to apply all changes." -ForegroundColor Yellow
    }
} else {
    Write-Host "[ERROR] Error Applying Tweaks" -ForegroundColor Red
    Write-Host "========================================" -ForegroundColor Red
    Write-Host ""
    Write-Host "An error occurred while applying tweaks:" -ForegroundColor Red
    Write-Host $errorMessage -ForegroundColor Red
    Write-Host ""
    Write-Host "If the problem persists, run the script as Administrator and check that all tweaks are compatible with your system." -ForegroundColor Yellow
    exit 1
}
"""


def build_postamble(reboot_timeout: int = DEFAULT_REBOOT_TIMEOUT) -> str:
    """Execution summary plus the success/failure completion check."""
    if reboot_timeout < 1:
        raise ValueError("reboot_timeout must be at least 1 second")
    return SUMMARY_BLOCK + _render(COMPLETION_BLOCK, timeout=reboot_timeout)


def wrap_script(
    code: str,
    create_restore_point: bool,
    reboot_timeout: int = DEFAULT_REBOOT_TIMEOUT,
) -> str:
    """Wrap composed code with the guarded preamble and completion postamble."""
    return build_preamble(create_restore_point) + "\n" + code + "\n" + build_postamble(reboot_timeout)
